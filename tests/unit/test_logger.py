"""日志格式单元测试"""

import json
import logging


def _record(msg="hello", **extra):
    record = logging.LogRecord("rubi.test", logging.INFO, __file__, 10, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONLogging:

    def test_one_json_object_per_record(self):
        from common.logger import JSONFormatter

        data = json.loads(JSONFormatter().format(_record(conversation_id="conv-1")))
        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["conversation_id"] == "conv-1"
        assert "user_id" not in data

    def test_request_context_attached(self):
        from common.logger import (
            JSONFormatter,
            RequestContextFilter,
            bind_request_context,
        )

        bind_request_context(request_id="req-1", user_id="u1")
        record = _record()
        assert RequestContextFilter().filter(record)

        data = json.loads(JSONFormatter().format(record))
        assert data["request_id"] == "req-1"
        assert data["user_id"] == "u1"

    def test_explicit_extra_wins(self):
        from common.logger import RequestContextFilter, bind_request_context

        bind_request_context(user_id="from-request")
        record = _record(user_id="explicit")
        RequestContextFilter().filter(record)
        assert record.user_id == "explicit"
