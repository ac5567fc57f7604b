"""
Photo Tagger - tag images through their embedded metadata

Browse a directory of images, attach free-text tags stored in each
image's EXIF UserComment, and play tag-filtered slideshows.
"""

__version__ = "0.1.0"
