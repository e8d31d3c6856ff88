"""Internal constants shared across the library."""

BRIDGE_URL = "http://127.0.0.1:8080"
USER_AGENT = "pyhoming"

# Steering actuator range (absolute deflection accepted by the wheels).
STEERING_LIMIT = 1.0

# ------------------------------------------------------------------
# Turning policy defaults
# ------------------------------------------------------------------

DRIVE_DURATION_S = 1.0
ALIGNMENT_THRESHOLD_RAD = 0.01
DAMPING_FACTOR = 5.0
MIN_HEADING_DISPLACEMENT = 1e-3

# ------------------------------------------------------------------
# Bridge endpoints
# ------------------------------------------------------------------

CAMERA_LOCATE_ENDPOINT = "/camera/locate"
MOTOR_VELOCITY_ENDPOINT = "/motor/velocity"
WHEELS_ANGLE_ENDPOINT = "/wheels/angle"
