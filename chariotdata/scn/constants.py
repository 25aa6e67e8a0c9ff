"""Fixed widths of the scenario (.scn) player-data block.

As with the empires.dat layouts, *_SKIP widths cover bytes that are read
past but not decoded.
"""

PLAYER_NAME_LENGTH = 256
MAX_PLAYERS = 16
AI_TYPE_COUNT = 4
SCENARIO_TEXT_COUNT = 10
PLAYER_DATA_UNKNOWN_SKIP = 8        # after the conquest flag
INDIVIDUAL_VICTORY_SLOTS = 180
DISABLED_RESEARCH_SLOTS = 20
SEPARATOR_VALUE = -1

# Preview thumbnail
THUMBNAIL_UNKNOWN_SKIP_1 = 22       # included thumbnails only
THUMBNAIL_UNKNOWN_SKIP_2 = 16       # included thumbnails only
THUMBNAIL_ABSENT_SKIP = 2           # trailing bytes when no thumbnail
THUMBNAIL_HEADER_SIZE = 40          # subtracted from the declared pixel length
