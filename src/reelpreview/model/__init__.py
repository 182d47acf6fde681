"""
The MODEL layer contains pure data structures and layout logic.
It has NO knowledge of the GUI (Qt) or of pixels.
It deals with Shapes, Packing, Geometry and the serialized layout record.
"""
