"""Build-time defaults for clevis-decrypt."""

DEFAULT_CMD_DIR = "/usr/libexec/clevis"
DEFAULT_CONFIG_PATH = "/etc/clevis/decrypt.yaml"

CMD_DIR_ENV = "CLEVIS_CMD_DIR"
CONFIG_ENV = "CLEVIS_DECRYPT_CONFIG"

PINS_SEGMENT = "pins"
PIN_HEADER_KEY = ("clevis", "pin")
LEGACY_PIN_HEADER_KEY = "clevis.pin"

PLUGIN_ACTION = "decrypt"

# Used when the platform does not report PC_PATH_MAX.
FALLBACK_PATH_MAX = 4096
