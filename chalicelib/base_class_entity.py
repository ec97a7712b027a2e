from datetime import datetime
from typing import Tuple, Dict, List, Any, Optional

from chalicelib.constants.substitute_keys import from_db
from chalicelib.utils import exceptions
from chalicelib.utils.data import substitute_keys
from chalicelib.utils.logger import logger


class EntityBase:
    pk = None
    sk = None
    record_type = ''

    required_immutable_fields_validation = {}
    required_mutable_fields_validation = {}
    optional_fields_validation = {}

    def __init__(self, store, id_):
        self.store = store
        self.id_: str = id_
        self.db_record: Dict = {}
        self.request_data: Any[Dict, None] = None

    def _get_pk_sk(self) -> Tuple[str, str]:
        """
        Should be re-implemented in each child class
        :return:
        partkey, sortkey of db item for child
        """
        return self.pk, self.sk

    def _get_db_item(self) -> Dict:
        return self.store.get_db_item(*self._get_pk_sk())

    def _to_dict(self) -> Dict:
        """
        Should be re-implemented in each child class
        :return:
        dict of item's attributes
        """
        return {
            'id_': self.id_
        }

    def _init_db_record(self) -> None:
        """
        New DB record initialization
        :return:
        None
        """
        pk, sk = self._get_pk_sk()
        self.db_record = {
            'partkey': pk,
            'sortkey': sk,
            'record_type': self.record_type,
            **{key: value for key, value in self._to_dict().items() if value is not None}
        }

    @classmethod
    def _known_fields(cls) -> List[str]:
        return [*cls.required_immutable_fields_validation.keys(),
                *cls.required_mutable_fields_validation.keys(),
                *cls.optional_fields_validation.keys()]

    @classmethod
    def whitelist_body(cls, request_body: Dict) -> Dict:
        """
        Drops request fields the entity does not know about
        """
        known_fields = cls._known_fields()
        dropped = [key for key in request_body if key not in known_fields]
        if dropped:
            logger.warning(f'whitelist_body ::: {cls.record_type} unknown fields {dropped} are ignored')
        return {key: value for key, value in request_body.items() if key in known_fields}

    @staticmethod
    def raise_validation_error(key, value=None):
        message = f'Validation error occurred while validating field={key}'
        logger.error(f"raise_validation_error ::: {message}, {value=}")
        raise exceptions.ValidationException(message)

    def _validate_mandatory_fields(self):
        """
        Validates mandatory fields if all fields have correct type to put to db
        Raise ValidationException in case if a field is not valid
        """
        for key, validator_func in {
            **self.required_immutable_fields_validation,
            **self.required_mutable_fields_validation
        }.items():
            if validator_func(self.db_record.get(key)) is False:
                self.raise_validation_error(key, self.db_record.get(key))

    def _validate_optional_fields(self):
        """
        Validates optional fields if all fields have correct type to put to db
        Raise ValidationException in case if a field is not valid
        """
        for key, validator_func in self.optional_fields_validation.items():
            if self.db_record.get(key) is not None and validator_func(self.db_record.get(key)) is False:
                self.raise_validation_error(key, self.db_record.get(key))

    def _get_validated_update_dict(self, update_body: Dict) -> Dict:
        """
        Validates fields for update, only mutable and optional fields may be updated
        Raise ValidationException in case if a field is not valid
        :return:
        Clean dict for update
        """
        clean_dict = {}
        validation_dict = {**self.required_mutable_fields_validation, **self.optional_fields_validation}
        for key, value in update_body.items():
            if key not in validation_dict:
                logger.warning(f'_get_validated_update_dict ::: {key=} can not be updated, skipping..')
                continue
            if validation_dict[key](value) is not True:
                self.raise_validation_error(key, value)
            clean_dict[key] = value
        return clean_dict

    def _create_db_record(self) -> None:
        """
        Creates entity db record
        """
        self._init_db_record()
        self._validate_mandatory_fields()
        self._validate_optional_fields()
        self.store.put_db_record(self.db_record)
        logger.info(f"_create_db_record ::: {self.record_type=} {self.id_=} {self.db_record.get('partkey')=} "
                    f"{self.db_record.get('sortkey')=} successfully created")

    def _update_fields_whitelist(self) -> List:
        return [*self.required_mutable_fields_validation.keys(), *self.optional_fields_validation.keys()]

    def _update_db_record(self, update_body: Dict) -> Optional[Dict]:
        """
        Updates entity db record
        Raise RecordNotFound if there is no record to update
        """
        pk, sk = self._get_pk_sk()
        update_dict = self._get_validated_update_dict(update_body)
        if 'date_updated' in self._update_fields_whitelist():
            update_dict['date_updated'] = datetime.now().isoformat(timespec="seconds")
        updated = self.store.update_db_record(
            key={'partkey': pk, 'sortkey': sk},
            update_body=update_dict,
            allowed_attrs_to_update=self._update_fields_whitelist()
        )
        if updated is None:
            raise exceptions.RecordNotFound(f'{self.record_type} {self.id_} not found')
        logger.info(f"_update_db_record ::: {self.record_type=} "
                    f"{self.id_=} {pk=} {sk=} successfully updated")
        return updated

    def _delete_db_record(self) -> int:
        pk, sk = self._get_pk_sk()
        deleted = self.store.delete_db_record({'partkey': pk, 'sortkey': sk})
        logger.info(f"_delete_db_record ::: {self.record_type=} {self.id_=} {deleted=}")
        return 1 if deleted else 0

    def _to_ui(self) -> Dict:
        item = self._to_dict()
        substitute_keys(dict_to_process=item, base_keys=from_db)
        return item
