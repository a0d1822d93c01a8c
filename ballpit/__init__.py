# ── Central defaults (tune here, not scattered across files) ──

# Pit
BODY_COUNT = 15
VIEWPORT = (1280, 720)
RADIUS_RANGE = (30.0, 60.0)
SPEED_RANGE = (0.5, 2.1)
N_VISUALS = 10
EDGE_MARGIN = 150.0
SEPARATION_SLACK = 1.0
PLACEMENT_ATTEMPTS = 100

# Rendering
FPS = 60
BG_COLOR = (241, 245, 249)
FACE_COLOR = (30, 41, 59)
AVATAR_COLORS = [
    (183, 201, 226),  # Classic
    (255, 183, 178),  # Coral
    (181, 234, 215),  # Mint
    (226, 240, 203),  # Lime
    (255, 218, 193),  # Peach
    (199, 206, 234),  # Periwinkle
    (71, 85, 105),    # Midnight
    (252, 211, 77),   # Golden
    (244, 114, 182),  # Bubblegum
    (110, 231, 183),  # Seafoam
]

# Evaluation
N_STEPS = 2000
SEED = 42
