"""
Color palette for the tile raycaster
"""

# Background colors
COLOR_BG = (20, 22, 28)           # Main background
COLOR_CEILING = (38, 40, 52)      # Upper half of the 3D view
COLOR_FLOOR = (55, 50, 45)        # Lower half of the 3D view
COLOR_VOID = (8, 8, 12)           # Columns with no wall hit

# UI colors
COLOR_TEXT = (210, 210, 210)      # Normal text
COLOR_TEXT_DIM = (150, 150, 150)  # Dimmed text

# Minimap colors
COLOR_MINIMAP_BG = (20, 22, 28, 200)
COLOR_MINIMAP_BORDER = (60, 65, 75)
COLOR_MINIMAP_EMPTY = (40, 45, 55)
COLOR_PLAYER = (70, 140, 255)     # Player
COLOR_RAY = (230, 210, 80)        # Fan rays on the minimap

# Material base colors, indexed by cell code
MATERIAL_COLORS = {
    1: (140, 80, 60),    # brick
    2: (120, 120, 125),  # stone
    3: (150, 155, 165),  # metal
    4: (130, 90, 50),    # wood
    5: (70, 120, 90),    # mossy stone
    6: (90, 90, 150),    # blue tile
    7: (170, 150, 90),   # sandstone
    8: (110, 60, 110),   # purple brick
    9: (200, 200, 200),  # plaster
}

COLOR_MATERIAL_DEFAULT = (128, 128, 128)
