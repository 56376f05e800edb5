"""postergrid -- contribution-style poster grids.

Turns text (stamped with a fixed 5x7 bitmap font) or a day-level
activity calendar into a 7-row intensity grid, colors it through a
5-step palette, and exports it as a portable JSON design document, a
PNG image, or an SVG image.
"""
