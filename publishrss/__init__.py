"""
PublishRSS: a personal RSS reader and publisher.

Subscribe to remote feeds, write your own posts, and publish them as a
public RSS feed and a token-protected private one.
"""

__version__ = "1.0.0"
