# Element ids shared by the control page, the status synchronizer and the debouncer.

# Angle control
ANGLE_SLIDER = "angle"
ANGLE_TEXT = "angle_val"

# Sensor / calibration readouts
RAW_TEXT = "raw"
CAL_TEXT = "cal"
MIN_TEXT = "min"
MAX_TEXT = "max"
RANGE_TEXT = "range"
CAL_FILL = "cal_fill"
CAL_STATE_TEXT = "cal_state"
NOTICE_TEXT = "notice_text"

# Network readouts
WIFI_TEXT = "wifi"
IP_TEXT = "ip"
CLIENTS_TEXT = "clients"

# Pulse control
PULSE_STATUS_TEXT = "pulse"
PULSE_TEXT = "pulse_val"
PULSE_SLIDER = "pulse_range"
PULSE_INPUT = "pulse_input"

# Servo limits
SERVO_MIN_INPUT = "servo_min"
SERVO_MAX_INPUT = "servo_max"
SERVO_ZERO_INPUT = "servo_zero"
SERVO_RANGE_TEXT = "servo_range"

# Editable fields; programmatic writes to these go through the focus guard
EDITABLE = frozenset(
    {
        ANGLE_SLIDER,
        PULSE_SLIDER,
        PULSE_INPUT,
        SERVO_MIN_INPUT,
        SERVO_MAX_INPUT,
        SERVO_ZERO_INPUT,
    }
)
