import sys
import os

# Add the backend directory to the Python path so we can import our app modules
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.config import settings
from app.services.dynamodb_service import DynamoDBService


def reset_dynamodb_table():
    """Delete the saved-recipes table and recreate it with the user index."""
    print("Initializing DynamoDB client...")
    service = DynamoDBService(settings)

    try:
        print(f"Deleting table {settings.DYNAMODB_TABLE_NAME}...")
        service.table.delete()
        print("Waiting for table deletion...")
        service.table.wait_until_not_exists()
    except service.dynamodb.meta.client.exceptions.ResourceNotFoundException:
        print("Table didn't exist, nothing to delete.")

    print(f"Creating table {settings.DYNAMODB_TABLE_NAME}...")
    service.table = service.dynamodb.Table(settings.DYNAMODB_TABLE_NAME)
    service.ensure_table_exists()
    print("Table is ready.")


if __name__ == "__main__":
    reset_dynamodb_table()
