"""Açık Kuran user translations API.

Lets a signed-in reader keep their own translation of a verse, with
numbered footnotes, and lets anyone look it up by user and verse.
"""

__version__ = "0.1.0"
