# Service layer for the Servo Web Commander
# - device_client:    HTTP client for the servo unit (status read, send-and-ignore commands)
# - status_sync:      periodic status poll projected onto the page
# - debounce:         trailing-edge debounce for the pulse controls
# - controls:         angle, calibration and servo-limit actions
# - simulated_device: in-process device for running without hardware
