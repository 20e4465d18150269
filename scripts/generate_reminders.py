from app import create_app
from app.extensions.storage import get_collection_store
from app.services.reminder_service import ReminderService


def main() -> None:
    app = create_app()
    with app.app_context():
        created = ReminderService(get_collection_store()).generate_for_goals()
        print(f"Reminders created: {len(created)}")


if __name__ == "__main__":
    main()
