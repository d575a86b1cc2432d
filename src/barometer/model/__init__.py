"""
The MODEL layer contains pure data structures: liquids, the ambient
environment and the tube records. It has NO knowledge of drawing and does
not solve anything; the controller layer does.
"""
