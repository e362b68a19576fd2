"""Protocol constants, enums, and field mappings for Botvac cloud robots."""

from enum import IntEnum, StrEnum

# --- Endpoints ---
BEEHIVE_URL = "https://beehive.neatocloud.com"
NUCLEO_URL = "https://nucleo.neatocloud.com:4443"
OAUTH_BASE_URL = "https://apps.neatorobotics.com/oauth2"
OAUTH_AUTHORIZE_URL = f"{OAUTH_BASE_URL}/authorize"
OAUTH_TOKEN_URL = f"{OAUTH_BASE_URL}/token"

# Robot messages path, relative to the robot's nucleo_url
ROBOT_MESSAGES_PATH = "/vendors/neato/robots/{serial}/messages"

# Accept headers for the two APIs
BEEHIVE_ACCEPT = "application/vnd.neato.beehive.v1+json"
NUCLEO_ACCEPT = "application/vnd.neato.nucleo.v1"

# HMAC auth scheme for robot requests
NUCLEO_AUTH_SCHEME = "NEATOAPP"

# --- Robot commands (nucleo "cmd" field) ---
CMD_GET_ROBOT_STATE = "getRobotState"
CMD_START_CLEANING = "startCleaning"
CMD_RESUME_CLEANING = "resumeCleaning"
CMD_PAUSE_CLEANING = "pauseCleaning"
CMD_STOP_CLEANING = "stopCleaning"
CMD_SEND_TO_BASE = "sendToBase"

# Vendor result string for an accepted request
RESULT_OK = "ok"

# --- Timing ---
REQUEST_TIMEOUT = 15.0  # seconds per HTTP request

# State snapshots younger than this are served from the cache
DEFAULT_STATE_TTL = 3.0  # seconds

# Legacy pause-then-dock: the robot needs a while after pausing before
# goToBase shows up in availableCommands.
DOCK_MAX_ATTEMPTS = 30
DOCK_RETRY_DELAY = 1.0  # seconds

# Polling
DEFAULT_POLL_INTERVAL = 60  # seconds
MIN_POLL_INTERVAL = 10
MAX_POLL_INTERVAL = 600

# Spot size in centimeters
SPOT_WIDTH = 100
SPOT_HEIGHT = 100

# OAuth tokens are treated as expired this long before they really are
TOKEN_EXPIRY_MARGIN = 1.0  # seconds

# --- Host capability names ---
CAPABILITY_STATUS = "vacuum_status"
CAPABILITY_BATTERY = "measure_battery"

# --- Host setting keys ---
SETTING_POLL_INTERVAL = "poll_interval"
SETTING_ECO_MODE = "eco_mode"
SETTING_NAVIGATION_MODE = "navigation_mode"
SETTING_NO_GO_LINES = "no_go_lines"


class RobotState(IntEnum):
    """Top-level robot state from getRobotState field "state"."""

    INVALID = 0
    IDLE = 1
    BUSY = 2
    PAUSED = 3
    ERROR = 4


class RobotAction(IntEnum):
    """What a BUSY robot is doing, from getRobotState field "action"."""

    NONE = 0
    HOUSE_CLEANING = 1
    SPOT_CLEANING = 2
    MANUAL_CLEANING = 3
    DOCKING = 4
    USER_MENU_ACTIVE = 5
    SUSPENDED_CLEANING = 6
    UPDATING = 7
    COPYING_LOGS = 8
    RECOVERING_LOCATION = 9
    IEC_TEST = 10
    MAP_CLEANING = 11
    EXPLORING_MAP = 12
    ACQUIRING_PERSISTENT_MAPS = 13
    CREATING_UPLOADING_MAP = 14
    SUSPENDED_EXPLORATION = 15


class CleaningCategory(IntEnum):
    """startCleaning "category" parameter."""

    MANUAL = 1
    HOUSE = 2
    SPOT = 3
    PERSISTENT_MAP = 4  # house clean honouring no-go lines


class CleaningMode(IntEnum):
    """Suction power."""

    ECO = 1
    TURBO = 2


class CleaningModifier(IntEnum):
    """How many passes over each spot."""

    NORMAL = 1
    DOUBLE = 2


class NavigationMode(IntEnum):
    """startCleaning "navigationMode" parameter."""

    NORMAL = 1
    EXTRA_CARE = 2


class VacuumStatus(StrEnum):
    """Status value surfaced to the host."""

    CLEANING = "cleaning"
    SPOT_CLEANING = "spot_cleaning"
    CHARGING = "charging"
    DOCKED = "docked"
    STOPPED = "stopped"


NAVIGATION_MODES: dict[str, NavigationMode] = {
    "normal": NavigationMode.NORMAL,
    "extra_care": NavigationMode.EXTRA_CARE,
}

# Human readable texts for the vendor's "error" codes. Unknown codes are
# shown as-is.
ERRORS: dict[str, str] = {
    "ui_error_battery_battundervoltlithiumsafety": "Replace battery",
    "ui_error_battery_critical": "Replace battery",
    "ui_error_battery_invalidsensor": "Replace battery",
    "ui_error_battery_lithiumadapterfailure": "Replace battery",
    "ui_error_battery_mismatch": "Replace battery",
    "ui_error_battery_nothermistor": "Replace battery",
    "ui_error_battery_overtemp": "Replace battery",
    "ui_error_battery_overvolt": "Replace battery",
    "ui_error_battery_undercurrent": "Replace battery",
    "ui_error_battery_undertemp": "Replace battery",
    "ui_error_battery_undervolt": "Replace battery",
    "ui_error_battery_unplugged": "Replace battery",
    "ui_error_brush_stuck": "Brush stuck",
    "ui_error_brush_overloaded": "Brush overloaded",
    "ui_error_bumper_stuck": "Bumper stuck",
    "ui_error_check_battery_switch": "Check battery",
    "ui_error_corrupt_scb": "Call customer service corrupt board",
    "ui_error_deck_debris": "Deck debris",
    "ui_error_dflt_app": "Check MyNeato app",
    "ui_error_disconnect_chrg_cable": "Disconnected charge cable",
    "ui_error_disconnect_usb_cable": "Disconnected USB cable",
    "ui_error_dust_bin_missing": "Dust bin missing",
    "ui_error_dust_bin_full": "Dust bin full",
    "ui_error_dust_bin_emptied": "Dust bin emptied",
    "ui_error_hardware_failure": "Hardware failure",
    "ui_error_ldrop_stuck": "Clear my path",
    "ui_error_lds_jammed": "Clear my path",
    "ui_error_lds_bad_packets": "Check MyNeato app",
    "ui_error_lds_disconnected": "Check MyNeato app",
    "ui_error_lds_missed_packets": "Check MyNeato app",
    "ui_error_lwheel_stuck": "Clear my path",
    "ui_error_navigation_backdrop_frontbump": "Clear my path",
    "ui_error_navigation_backdrop_leftbump": "Clear my path",
    "ui_error_navigation_backdrop_wheelextended": "Clear my path",
    "ui_error_navigation_noprogress": "Clear my path",
    "ui_error_navigation_origin_unclean": "Clear my path",
    "ui_error_navigation_pathproblems": "Cannot return to base",
    "ui_error_navigation_pinkycommsfail": "Clear my path",
    "ui_error_navigation_falling": "Clear my path",
    "ui_error_navigation_noexitstogo": "Clear my path",
    "ui_error_navigation_nomotioncommands": "Clear my path",
    "ui_error_navigation_rightdrop_leftbump": "Clear my path",
    "ui_error_navigation_undockingfailed": "Clear my path",
    "ui_error_picked_up": "Picked up",
    "ui_error_qa_fail": "Check MyNeato app",
    "ui_error_rdrop_stuck": "Clear my path",
    "ui_error_reconnect_failed": "Reconnect failed",
    "ui_error_rwheel_stuck": "Clear my path",
    "ui_error_stuck": "Stuck!",
    "ui_error_unable_to_return_to_base": "Unable to return to base",
    "ui_error_unable_to_see": "Clean vacuum sensors",
    "ui_error_vacuum_slip": "Clear my path",
    "ui_error_vacuum_stuck": "Clear my path",
    "ui_error_warning": "Error check app",
    "batt_base_connect_fail": "Battery failed to connect to base",
    "batt_base_no_power": "Battery base has no power",
    "batt_low": "Battery low",
    "batt_on_base": "Battery on base",
    "clean_tilt_on_start": "Clean the tilt on start",
    "dustbin_full": "Dust bin full",
    "dustbin_missing": "Dust bin missing",
    "gen_picked_up": "Picked up",
    "hw_fail": "Hardware failure",
    "hw_tof_sensor_sensor": "Hardware sensor disconnected",
    "lds_bad_packets": "Bad packets",
    "lds_deck_debris": "Debris on deck",
    "lds_disconnected": "Disconnected",
    "lds_jammed": "Jammed",
    "lds_missed_packets": "Missed packets",
    "maint_brush_stuck": "Brush stuck",
    "maint_brush_overload": "Brush overloaded",
    "maint_bumper_stuck": "Bumper stuck",
    "maint_customer_support_qa": "Contact customer support",
    "maint_vacuum_stuck": "Vacuum is stuck",
    "maint_vacuum_slip": "Vacuum is stuck",
    "maint_left_drop_stuck": "Vacuum is stuck",
    "maint_left_wheel_stuck": "Vacuum is stuck",
    "maint_right_drop_stuck": "Vacuum is stuck",
    "maint_right_wheel_stuck": "Vacuum is stuck",
    "not_on_charge_base": "Not on the charge base",
    "nav_robot_falling": "Clear my path",
    "nav_no_path": "Clear my path",
    "nav_path_problem": "Clear my path",
    "nav_backdrop_frontbump": "Clear my path",
    "nav_backdrop_leftbump": "Clear my path",
    "nav_backdrop_wheelextended": "Clear my path",
    "nav_mag_sensor": "Clear my path",
    "nav_no_exit": "Clear my path",
    "nav_no_movement": "Clear my path",
    "nav_rightdrop_leftbump": "Clear my path",
    "nav_undocking_failed": "Clear my path",
}
