# config.py

# ===== Frame =====
FRAME_WIDTH = 640
FRAME_HEIGHT = 480


# ===== Regions of interest (x, y, w, h) =====
# SIDE is only looked at during direction calibration.
SIDE_ROI = (410, 255, 230, 100)
CENTER_ROI = (160, 245, 320, 110)


# ===== HSV thresholds (h_min, h_max, s_min, s_max, v_min, v_max) =====
BLUE_HSV = (36, 147, 85, 202, 46, 222)
YELLOW_HSV = (0, 46, 101, 221, 177, 255)


# ===== Blob detection =====
MIN_AREA = 72          # contour area must be strictly greater


# ===== Direction calibration =====
SAMPLE_SIZE = 5


# ===== Steering =====
STEERING_MIN = -0.3
STEERING_MAX = 0.3
STEERING_STEP = 0.025


# ===== Servo (optional actuation) =====
SERVO_CHANNEL = 0
SERVO_CENTER_US = 1600
SERVO_LEFT_US = 950
SERVO_RIGHT_US = 2200

STEERING_INVERT = True
STEERING_DEAD_ZONE = 0.03


# ===== Logging =====
LOG_TAG = "group_16"
