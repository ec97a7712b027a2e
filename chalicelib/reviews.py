from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Tuple
from uuid import uuid4

from chalice import Response
from chalice.app import Request

from chalicelib.base_class_entity import EntityBase
from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200
from chalicelib.utils import data as utils_data, app as utils_app
from chalicelib.utils.auth import authorize, authenticated, admin_only


class Review(EntityBase):
    """
    Reviews are append-only, they are not bound to a user
    """
    pk = keys_structure.reviews_pk
    sk = keys_structure.reviews_sk
    record_type = 'review'

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'name_': lambda x: isinstance(x, str) and len(x) > 0,
        'details': lambda x: isinstance(x, str) and len(x) > 0,
        'rating': lambda x: isinstance(x, Decimal) and x.is_finite() and 0 <= x <= 5,
        'date_created': lambda x: isinstance(x, str)
    }

    def __init__(self, store, id_, **kwargs):
        EntityBase.__init__(self, store, id_)

        self.name_: str = kwargs.get('name_')
        self.details: str = kwargs.get('details')
        rating = kwargs.get('rating')
        self.rating: Decimal = Decimal(str(rating)) if type(rating) in [int, float, Decimal] else rating
        self.date_created: str = kwargs.get('date_created') or datetime.now().isoformat(timespec='seconds')

    @classmethod
    def init_request_create(cls, request: Request, store) -> 'Review':
        request_body = cls.whitelist_body(utils_data.parse_raw_body(request))
        for key in ('id_', 'date_created'):
            request_body.pop(key, None)
        return cls(store, str(uuid4()), **request_body)

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk, self.sk.format(review_id=self.id_)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'name_': self.name_,
            'details': self.details,
            'rating': self.rating,
            'date_created': self.date_created
        }


@utils_app.request_exception_handler
@authorize()
@utils_app.log_start_finish
def endpoint_get_reviews(request: Request, services) -> Response:
    review_db_records: List[Dict] = services.store.query_items_paged(Review.pk)
    return Response(status_code=http200, body=[utils_data.record_to_ui(record) for record in review_db_records])


@utils_app.request_exception_handler
@authorize(authenticated, admin_only)
@utils_app.log_start_finish
def endpoint_create_review(request: Request, services) -> Response:
    review = Review.init_request_create(request, services.store)
    review._create_db_record()
    return Response(status_code=http200, body={'message': 'Review successfully created', 'id': review.id_})


@utils_app.request_exception_handler
@authorize(authenticated, admin_only)
@utils_app.log_start_finish
def endpoint_delete_review(request: Request, services, review_id: str) -> Response:
    return Response(status_code=http200, body={'deleted_count': Review(services.store, review_id)._delete_db_record()})
