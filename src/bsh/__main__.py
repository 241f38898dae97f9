"""Entry point: roll initiative for the sample encounter from a prompt."""

from bsh.config import settings, load_rules_configuration
from bsh.utils.logging import setup_logging
from bsh.core import Combat, initialize_combat
from bsh.scenarios import create_sample_encounter


# ─────────────────────────────────────────────────────────────────────────────
# Command Loop
# ─────────────────────────────────────────────────────────────────────────────
def get_player_input() -> str | None:
    """Get input from the player, handling EOF and interrupts."""
    try:
        text = input("\n> ").strip()
        return text if text else None
    except (EOFError, KeyboardInterrupt):
        return "quit"


def command_loop(combat: Combat) -> None:
    """Process commands until quit."""

    while True:
        command = get_player_input()

        if command is None:
            print("(Type 'roll', 'order' or 'quit')")
            continue

        command_lower = command.lower()

        if command_lower in ("quit", "exit", "q"):
            print("The Black Sword sleeps.")
            break

        if command_lower == "roll":
            if combat.roll_all():
                print(combat.summary())
            else:
                print(f"[Initiative could not be rolled: {combat.last_error}]")
        elif command_lower == "order":
            print(combat.summary())
        else:
            print(f"Unknown command: {command}")


def main() -> None:
    """Main entry point."""
    logger = setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        enable_color=settings.enable_color,
    )

    logger.info("Starting Black Sword Hack initiative tracker")
    logger.debug(f"Configuration: {settings}")

    rules = load_rules_configuration(settings.rules_file)
    combat = initialize_combat(create_sample_encounter(), rules=rules, dice_seed=settings.dice_seed)
    print("A ruined temple. Steel is drawn. Type 'roll' to roll initiative.")
    command_loop(combat)


if __name__ == "__main__":
    main()
