"""
The CONTROLLER layer turns the model into pixels and files.
It uses Qt image classes (QImage, QPainter) but no widgets.
"""
