APP_NAME = "mobile-dev-mcp"
APP_VERSION = "1.0.0"

FREE_TOOLS = (
    "screenshot_emulator",
    "list_devices",
    "get_device_info",
    "get_app_info",
    "get_adb_logs",
    "get_metro_logs",
    "check_metro_status",
    "get_license_status",
    "set_license_key",
)

ADVANCED_ONLY_TOOLS = (
    # iOS Simulator
    "screenshot_ios_simulator",
    "list_ios_simulators",
    "get_ios_simulator_info",
    "get_ios_simulator_logs",
    # UI inspection
    "get_ui_tree",
    "find_element",
    "wait_for_element",
    "get_element_property",
    "assert_element",
    # screen analysis
    "suggest_action",
    "analyze_screen",
    "get_screen_text",
)

ADVANCED_TOOLS = FREE_TOOLS + ADVANCED_ONLY_TOOLS

MAX_SEARCH_LEN = 500
MAX_GOAL_LEN = 1000
DEFAULT_LOG_LINES = 50
