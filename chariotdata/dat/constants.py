"""Fixed widths of the empires.dat layouts.

Every *_SKIP constant below covers a region whose contents are not
understood. The widths were worked out from the shipped files; the bytes
may well be meaningful, they are just not decoded yet.
"""

# Fixed-width string fields
AGE_NAME_LENGTH = 31
GRAPHIC_NAME_LENGTH = 21
GRAPHIC_SHORT_NAME_LENGTH = 13

# Graphics
GRAPHIC_UNKNOWN_SKIP = 2            # between sprite id and layer
DELTA_UNKNOWN_SKIP_1 = 6            # after the delta's graphic id
DELTA_UNKNOWN_SKIP_2 = 2            # after display angle
ATTACK_SOUNDS_PER_ANGLE = 3

# Random maps
RANDOM_MAP_HEADER_SIZE = 72         # 10 x i32 + 4 x (count, pointer)
BASE_ZONE_UNKNOWN_SKIP_1 = 20       # between player spacing and start radius
BASE_ZONE_UNKNOWN_SKIP_2 = 8        # trailing
RANDOM_MAP_UNKNOWN_STRIDE = 24      # per entry of the trailing unknown table
