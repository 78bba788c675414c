import questionary
from config import (
    load_config, validate_config, update_config, reset_to_defaults,
    CONFIG_SCHEMA
)
from utils.logger import log_info, log_error, log_success


def config_menu(config: dict, path: str = None) -> dict:
    """
    Display the configuration menu and handle user selections.

    The dict is updated in place so the session and client, which hold a
    reference to it, see the new values immediately.
    """
    while True:
        choice = questionary.select(
            "⚙️ Config Menu — What would you like to do?",
            choices=[
                "View current config",
                "Update a setting",
                "Reset to defaults",
                "Validate configuration",
                "Back"
            ]
        ).ask()

        if choice == "View current config":
            view_config(config)

        elif choice == "Update a setting":
            update_setting_menu(config, path)

        elif choice == "Reset to defaults":
            reset_config_menu(config, path)

        elif choice == "Validate configuration":
            validate_config_menu(config)

        else:
            break

    return config


def view_config(config: dict):
    """Display the current configuration in a readable format."""
    log_info("\n" + "=" * 50)
    log_info("📋 Current Configuration")
    log_info("=" * 50)

    categories = {
        "Spotify Login": [
            "spotify_client_id", "spotify_redirect_uri", "spotify_scopes",
            "spotify_callback_mode", "spotify_callback_timeout",
        ],
        "Storage": ["spotify_cache_tokens", "spotify_state_file"],
        "Search": ["search_limit", "spotify_request_timeout"],
        "Display": ["title_width", "fallback_image_url"],
        "Logging": ["log_level", "log_file"],
    }

    for category, keys in categories.items():
        log_info(f"\n{category}:")
        for key in keys:
            if key in config:
                value = config[key]
                if isinstance(value, bool):
                    value = "✓ Enabled" if value else "✗ Disabled"
                elif isinstance(value, list):
                    value = ", ".join(str(v) for v in value)
                log_info(f"  {key}: {value}")

    log_info("\n" + "=" * 50)


def parse_setting_value(key: str, raw):
    """Convert prompt text into the type CONFIG_SCHEMA expects for ``key``.

    Raises ValueError for malformed numbers.
    """
    schema = CONFIG_SCHEMA.get(key, {})
    expected = schema.get("type")

    if expected == list:
        text = (raw or "").replace(",", " ")
        return [part for part in text.split() if part]
    if expected == int:
        return int(str(raw).strip())
    if expected == (int, float):
        number = float(str(raw).strip())
        return int(number) if number.is_integer() else number
    return raw


def update_setting_menu(config: dict, path: str = None) -> dict:
    """Menu to update individual settings."""
    editable_keys = list(CONFIG_SCHEMA.keys())
    editable_keys.append("Back")

    key = questionary.select(
        "Select setting to update:",
        choices=editable_keys
    ).ask()

    if key in (None, "Back"):
        return config

    schema = CONFIG_SCHEMA.get(key, {})
    current_value = config.get(key, "Not set")

    log_info(f"\nCurrent value: {current_value}")

    if "choices" in schema:
        new_value = questionary.select(
            f"Select new value for {key}:",
            choices=schema["choices"]
        ).ask()

    elif schema.get("type") == bool:
        new_value = questionary.confirm(
            f"Enable {key}?",
            default=current_value if isinstance(current_value, bool) else True
        ).ask()

    else:
        if isinstance(current_value, list):
            default = " ".join(str(v) for v in current_value)
        else:
            default = str(current_value) if current_value != "Not set" else ""

        hint = ""
        if "min" in schema or "max" in schema:
            hint = f" ({schema.get('min', 0)}-{schema.get('max', 9999)})"
        elif schema.get("type") == list:
            hint = " (space or comma separated)"

        new_value_str = questionary.text(f"Enter new value for {key}{hint}:", default=default).ask()
        if new_value_str is None:
            return config

        try:
            new_value = parse_setting_value(key, new_value_str)
        except ValueError:
            log_error("Invalid number format")
            return config

    if new_value is None:
        return config

    success, message = update_config(key, new_value, path)

    if success:
        log_success(message)
        config[key] = new_value
    else:
        log_error(message)

    return config


def reset_config_menu(config: dict, path: str = None) -> dict:
    """Menu to reset configuration to defaults."""
    confirm = questionary.confirm(
        "⚠️ Reset all settings to defaults? This cannot be undone.",
        default=False
    ).ask()

    if confirm:
        success, message = reset_to_defaults(path)

        if success:
            log_success(message)
            fresh = load_config(path)
            config.clear()
            config.update(fresh)
        else:
            log_error(message)

    return config


def validate_config_menu(config: dict):
    """Validate the current configuration and show any errors."""
    is_valid, errors = validate_config(config)

    log_info("\n" + "=" * 50)
    log_info("🔍 Configuration Validation")
    log_info("=" * 50)

    if is_valid:
        log_success("Configuration is valid! ✓")
    else:
        log_error("Configuration has errors:")
        for error in errors:
            log_info(f"  ✗ {error}")

    log_info("=" * 50)
