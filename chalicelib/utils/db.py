import functools
from typing import Dict, List, Optional, Tuple

from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError

from chalicelib.utils import exceptions
from chalicelib.utils.boto_clients import dynamodb_resource
from chalicelib.utils.logger import logger, log_exception

need_return_capacity = ('put_item', 'get_item', 'update_item', 'delete_item', 'query')


def db_call_logger(func):
    """
    should be used for any atomic
    get/put/update/delete/query call of the table,
    every call is attempted once
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger.debug(f'{func.__name__}:: args={args}, kwargs={kwargs}')
        if func.__name__ not in need_return_capacity:
            raise RuntimeError("This decorator only for DynamoDB methods")
        kwargs.update({'ReturnConsumedCapacity': 'TOTAL'})
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            log_exception(e, msg=f'Got exception while trying to {func.__name__}: ')
            raise
        logger.info(f'{func.__name__}:: SUCCESS, consumed={result.get("ConsumedCapacity")}')
        return result

    return wrapper


def get_table(table_name: str, endpoint_url: Optional[str] = None):
    table = dynamodb_resource(endpoint_url).Table(table_name)

    table.put_item = db_call_logger(table.put_item)
    table.get_item = db_call_logger(table.get_item)
    table.update_item = db_call_logger(table.update_item)
    table.delete_item = db_call_logger(table.delete_item)
    table.query = db_call_logger(table.query)

    return table


def is_conditional_check_failed(error: ClientError) -> bool:
    return error.response.get('Error', {}).get('Code') == 'ConditionalCheckFailedException'


def build_filter_expression(filters: Optional[Dict]):
    """
    Equality filter for all given attributes, None if there is nothing to filter
    """
    expression = None
    for attr_name, value in (filters or {}).items():
        condition = Attr(attr_name).eq(value)
        expression = condition if expression is None else expression & condition
    return expression


def generate_update_expression(update_body: dict, allowed_attrs_to_update: list, allowed_attrs_to_delete: list):
    """
    Generate expressions to update and delete attributes.
    if a key of update_body is empty - the attribute is deleted, else - attribute is updated.
    Attribute names always go through ExpressionAttributeNames
    """
    expr_attr_values = {}
    expr_attr_names = {}
    set_parts = []
    remove_parts = []
    for field in allowed_attrs_to_update:
        field_value = update_body.get(field, None)
        if field_value is None:
            continue
        expr_attr_names[f'#{field}'] = field
        # if field is in update_body but is equal to empty string, list etc. - delete field
        if field_value in ['', [], {}] and field in allowed_attrs_to_delete:
            remove_parts.append(f'#{field}')
        else:
            expr_attr_values[f':{field}'] = field_value
            set_parts.append(f'#{field}=:{field}')

    expression = ''
    if set_parts:
        expression += 'SET ' + ', '.join(set_parts)
    if remove_parts:
        expression += (' ' if expression else '') + 'REMOVE ' + ', '.join(remove_parts)

    return expression or None, expr_attr_names, expr_attr_values


class DynamoDBStore:
    """
    Collection-scoped access to the general table.
    A collection is a partkey, a document is addressed by (partkey, sortkey).
    The table is created lazily and kept for the process lifetime
    """

    def __init__(self, table_name: str, endpoint_url: Optional[str] = None):
        self.table_name = table_name
        self.endpoint_url = endpoint_url
        self._table = None

    def open(self) -> 'DynamoDBStore':
        if self._table is None:
            self._table = get_table(self.table_name, self.endpoint_url)
            logger.info(f'DynamoDBStore.open ::: table {self.table_name} is ready')
        return self

    def close(self) -> None:
        self._table = None
        logger.info(f'DynamoDBStore.close ::: table {self.table_name} released')

    @property
    def table(self):
        return self.open()._table

    def put_db_record(self, item: dict) -> None:
        self.table.put_item(Item=item)

    def put_db_record_if_absent(self, item: dict) -> bool:
        """
        Atomic insert, returns False if a record with the same key already exists
        """
        try:
            self.table.put_item(Item=item, ConditionExpression=Attr('partkey').not_exists())
        except ClientError as error:
            if is_conditional_check_failed(error):
                logger.info(f"put_db_record_if_absent ::: partkey={item['partkey']} "
                            f"sortkey={item['sortkey']} already exists")
                return False
            raise
        return True

    def find_db_item(self, partkey: str, sortkey: str) -> Optional[Dict]:
        result = self.table.get_item(Key={'partkey': partkey, 'sortkey': sortkey})
        return result.get('Item')

    def get_db_item(self, partkey: str, sortkey: str) -> Dict:
        item = self.find_db_item(partkey, sortkey)
        if item is None:
            logger.error(f"get_db_item ::: record partkey={partkey} sortkey={sortkey} not found")
            raise exceptions.RecordNotFound(f'record partkey={partkey} sortkey={sortkey} not found')
        return item

    def query_items_paginated(self, partkey: str, filters: Optional[Dict] = None, select: Optional[str] = None,
                              limit: Optional[int] = None, start_key: Optional[Dict] = None) -> Tuple[Dict, Optional[Dict]]:
        kwargs = {'KeyConditionExpression': Key('partkey').eq(partkey)}
        filter_expression = build_filter_expression(filters)
        if filter_expression is not None:
            kwargs.update({'FilterExpression': filter_expression})

        if select:
            kwargs.update({'Select': select})

        if limit:
            kwargs.update({'Limit': int(limit)})

        if start_key:
            kwargs.update({'ExclusiveStartKey': start_key})

        resp = self.table.query(**kwargs)
        return resp, resp.get('LastEvaluatedKey')

    def query_items_paged(self, partkey: str, filters: Optional[Dict] = None) -> List[Dict]:
        """ All items of the collection matching filters, follows LastEvaluatedKey """
        all_items = []
        resp, last_evaluated_key = self.query_items_paginated(partkey, filters=filters)
        all_items.extend(resp['Items'])

        while last_evaluated_key is not None:
            resp, last_evaluated_key = self.query_items_paginated(
                partkey, filters=filters, start_key=last_evaluated_key)
            all_items.extend(resp['Items'])

        return all_items

    def count_items(self, partkey: str) -> int:
        resp, last_evaluated_key = self.query_items_paginated(partkey, select='COUNT')
        count = resp['Count']

        while last_evaluated_key is not None:
            resp, last_evaluated_key = self.query_items_paginated(
                partkey, select='COUNT', start_key=last_evaluated_key)
            count += resp['Count']

        return count

    def update_db_record(self, key: dict, update_body: dict, allowed_attrs_to_update: list,
                         allowed_attrs_to_delete: Optional[list] = None) -> Optional[Dict]:
        """
        Updates an existing record only.
        Returns updated attributes, None if the record does not exist
        """
        expression, expr_attr_names, expr_attr_values = generate_update_expression(
            update_body=update_body,
            allowed_attrs_to_update=allowed_attrs_to_update,
            allowed_attrs_to_delete=allowed_attrs_to_delete or []
        )
        if expression is None:
            logger.warning(f'update_db_record ::: nothing to update for {key=}')
            return {} if self.find_db_item(key['partkey'], key['sortkey']) is not None else None

        update_item_dict = {
            "Key": key,
            "ReturnValues": "UPDATED_NEW",
            "UpdateExpression": expression,
            "ExpressionAttributeNames": expr_attr_names,
            "ConditionExpression": Attr('partkey').exists()
        }
        if expr_attr_values:
            update_item_dict["ExpressionAttributeValues"] = expr_attr_values

        try:
            resp = self.table.update_item(**update_item_dict)
        except ClientError as error:
            if is_conditional_check_failed(error):
                return None
            raise
        return resp.get('Attributes', {})

    def delete_db_record(self, key: dict) -> bool:
        """ Returns True if a record was deleted """
        resp = self.table.delete_item(Key=key, ReturnValues='ALL_OLD')
        return 'Attributes' in resp
