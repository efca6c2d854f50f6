"""Emporium: blog, shop and live chat service."""
