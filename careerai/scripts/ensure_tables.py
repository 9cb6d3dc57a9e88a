from careerai.database import ensure_tables_exist
from careerai.logging_config import setup_logging


def main():
    setup_logging()
    created = ensure_tables_exist()
    if created:
        print(f"DB table check complete: created {', '.join(created)}.")
    else:
        print("DB table check complete: nothing to create.")


if __name__ == "__main__":
    main()
