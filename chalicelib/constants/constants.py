ADMIN_ROLE = 'admin'

ACCESS_TOKEN_TTL_SECONDS = 60 * 60
ACCESS_TOKEN_ALGORITHM = 'HS256'

PAYMENT_CURRENCY = 'usd'
PAYMENT_METHOD_TYPES = ['card']

LIVENESS_MESSAGE = 'Bistro Boss is Sitting'
