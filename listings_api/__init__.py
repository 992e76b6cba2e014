"""
Global City listings API: properties, agents and their images.
"""
