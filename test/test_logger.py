import logging

from chalicelib.utils.logger import logger, log_exception


def test_request_id_prefix_is_added_once(caplog):
    logger.current_request_id = 'abc123'
    try:
        with caplog.at_level(logging.DEBUG):
            try:
                raise ValueError('boom')
            except ValueError:
                logger.exception('failed to cook')
            logger.info('cooked')
    finally:
        logger.current_request_id = None

    messages = [record.getMessage() for record in caplog.records]
    assert messages == ['[abc123] : failed to cook', '[abc123] : cooked']
    assert caplog.records[0].levelno == logging.ERROR
    assert caplog.records[0].exc_info is not None


def test_log_exception_prefix(caplog):
    logger.current_request_id = 'abc123'
    try:
        with caplog.at_level(logging.DEBUG):
            log_exception(error=RuntimeError('no soup'), msg='kitchen closed', status_code=500)
    finally:
        logger.current_request_id = None

    message = caplog.records[-1].getMessage()
    assert message.count('[abc123]') == 1
    assert '"exception": "RuntimeError"' in message
