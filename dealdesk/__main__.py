from dealdesk.cli.app import main_menu
from dealdesk.db import initialize_db
from dealdesk.logging import configure_logging, reconfigure


def main() -> None:
    configure_logging()
    initialize_db()
    reconfigure()
    main_menu()


if __name__ == "__main__":
    main()
