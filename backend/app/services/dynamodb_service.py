# backend/app/services/dynamodb_service.py

import logging
import uuid
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

import boto3
from boto3.dynamodb.conditions import Key
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    EndpointConnectionError,
    NoCredentialsError,
    NoRegionError,
)

from app.core.config import Settings
from app.core.exceptions import StorageConnectionError, StorageOperationError

logger = logging.getLogger(__name__)

CONNECTION_ERRORS = (EndpointConnectionError, NoCredentialsError, NoRegionError)


class DynamoDBService:
    def __init__(self, settings: Settings, dynamodb=None):
        """Initialize DynamoDB resource with configuration."""
        self.settings = settings
        try:
            self.dynamodb = dynamodb or boto3.resource(
                'dynamodb',
                aws_access_key_id=settings.AWS_ACCESS_KEY,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
                region_name=settings.AWS_REGION,
                endpoint_url=settings.DYNAMODB_ENDPOINT_URL
            )
        except (BotoCoreError, ValueError) as e:
            raise StorageConnectionError(f"Could not connect to DynamoDB: {e}") from e
        self.table = self.dynamodb.Table(settings.DYNAMODB_TABLE_NAME)

    def ensure_table_exists(self):
        """Ensure the recipes table exists with the user index."""
        try:
            self.table.load()
        except self.dynamodb.meta.client.exceptions.ResourceNotFoundException:
            self.table = self.dynamodb.create_table(
                TableName=self.settings.DYNAMODB_TABLE_NAME,
                KeySchema=[
                    {'AttributeName': 'recipe_id', 'KeyType': 'HASH'}
                ],
                AttributeDefinitions=[
                    {'AttributeName': 'recipe_id', 'AttributeType': 'S'},
                    {'AttributeName': 'user', 'AttributeType': 'S'}
                ],
                GlobalSecondaryIndexes=[
                    {
                        'IndexName': self.settings.DYNAMODB_USER_INDEX,
                        'KeySchema': [
                            {'AttributeName': 'user', 'KeyType': 'HASH'}
                        ],
                        'Projection': {'ProjectionType': 'ALL'},
                        'ProvisionedThroughput': {
                            'ReadCapacityUnits': 5,
                            'WriteCapacityUnits': 5
                        }
                    }
                ],
                ProvisionedThroughput={
                    'ReadCapacityUnits': 5,
                    'WriteCapacityUnits': 5
                }
            )
            self.table.wait_until_exists()
            logger.info("Created DynamoDB table %s", self.settings.DYNAMODB_TABLE_NAME)

    def _recipe_to_item(self, user: str, recipe: Dict[str, Any]) -> Dict[str, Any]:
        """Convert a recipe-shaped dict to a DynamoDB item."""
        servings = recipe.get('servings')
        if servings is not None and servings != "":
            try:
                # DynamoDB rejects floats, numbers go in as Decimal
                servings = Decimal(str(servings))
            except InvalidOperation as e:
                raise StorageOperationError(f"Cannot store servings value {servings!r}") from e
            if not servings.is_finite():
                raise StorageOperationError(f"Cannot store servings value {recipe.get('servings')!r}")
        else:
            servings = None

        steps = recipe.get('steps')
        if steps is None:
            steps = []
        elif not isinstance(steps, list):
            steps = [steps]

        item = {
            'recipe_id': str(uuid.uuid4()),  # Partition key
            'user': user,
            'title': str(recipe['title']) if recipe.get('title') is not None else None,
            'prep_time': str(recipe['prep_time']) if recipe.get('prep_time') is not None else None,
            'servings': servings,
            'steps': [str(step) for step in steps],
        }

        # Remove None values as DynamoDB doesn't support them
        return {k: v for k, v in item.items() if v is not None}

    def _item_to_record(self, item: Dict[str, Any]) -> Dict[str, Any]:
        """Convert a DynamoDB item back to the public record layout."""
        servings = item.get('servings')
        if isinstance(servings, Decimal):
            servings = int(servings) if servings == servings.to_integral_value() else float(servings)

        return {
            '_id': item['recipe_id'],
            'user': item['user'],
            'title': item.get('title'),
            'prep_time': item.get('prep_time'),
            'servings': servings,
            'steps': list(item.get('steps', [])),
        }

    def store_recipe(self, user: str, recipe: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a new recipe for ``user`` and return the stored record."""
        item = self._recipe_to_item(user, recipe)
        try:
            self.table.put_item(Item=item)
        except CONNECTION_ERRORS as e:
            raise StorageConnectionError(f"Could not connect to DynamoDB: {e}") from e
        except (ClientError, BotoCoreError) as e:
            logger.error("Error storing recipe for %s: %s", user, e)
            raise StorageOperationError("Failed to save recipe") from e
        return self._item_to_record(item)

    def list_recipes_by_user(self, user: str) -> List[Dict[str, Any]]:
        """All recipes owned by ``user``, following pagination to the end."""
        query = {
            'IndexName': self.settings.DYNAMODB_USER_INDEX,
            'KeyConditionExpression': Key('user').eq(user),
        }
        items = []
        try:
            while True:
                response = self.table.query(**query)
                items.extend(response.get('Items', []))
                last_key = response.get('LastEvaluatedKey')
                if not last_key:
                    break
                query['ExclusiveStartKey'] = last_key
        except CONNECTION_ERRORS as e:
            raise StorageConnectionError(f"Could not connect to DynamoDB: {e}") from e
        except (ClientError, BotoCoreError) as e:
            logger.error("Error listing recipes for %s: %s", user, e)
            raise StorageOperationError("Failed to fetch recipes") from e
        return [self._item_to_record(item) for item in items]
