"""
Tests for Session

Base URL normalisation, option merging and transport rebuilding on
token / log file changes.
"""

from unittest.mock import patch

import pytest

from letspeppol.client.session import Session, build_client_options, merge_options
from letspeppol.client.transport import HttpTransport
from letspeppol.client.exceptions import ConfigurationError
from tests.fixtures import FakeAdapter


class TestMergeOptions:
    """Tests for the recursive option merge."""

    def test_override_wins(self):
        assert merge_options({'timeout': 30}, {'timeout': 5}) == {'timeout': 5}

    def test_nested_dicts_merge_key_by_key(self):
        merged = merge_options(
            {'headers': {'Accept': 'application/json', 'User-Agent': 'a'}},
            {'headers': {'User-Agent': 'b'}},
        )
        assert merged == {'headers': {'Accept': 'application/json', 'User-Agent': 'b'}}

    def test_defaults_not_mutated(self):
        defaults = {'headers': {'Accept': 'application/json'}}
        merge_options(defaults, {'headers': {'X-Test': '1'}})
        assert defaults == {'headers': {'Accept': 'application/json'}}


class TestBuildClientOptions:
    """Tests for deriving transport options."""

    def test_defaults_without_token(self):
        options = build_client_options(None)
        assert options['timeout'] == 30
        assert options['headers']['Accept'] == 'application/json'
        assert options['headers']['Content-Type'] == 'application/json'
        assert options['headers']['User-Agent'] == 'LetsPeppol Python SDK'
        assert 'Authorization' not in options['headers']

    def test_token_adds_bearer_header(self):
        options = build_client_options('abc')
        assert options['headers']['Authorization'] == 'Bearer abc'

    def test_caller_options_take_precedence(self):
        options = build_client_options('abc', {'timeout': 5, 'headers': {'User-Agent': 'custom'}})
        assert options['timeout'] == 5
        assert options['headers']['User-Agent'] == 'custom'
        assert options['headers']['Authorization'] == 'Bearer abc'


class TestSession:
    """Tests for Session."""

    def test_minimal_construction(self):
        session = Session('https://api.example.com')
        assert session.get_base_url() == 'https://api.example.com'
        assert session.get_token() is None
        assert session.get_log_file() is None
        assert isinstance(session.get_client(), HttpTransport)

    def test_trailing_slash_stripped(self):
        session = Session('https://api.example.com/')
        assert session.base_url == 'https://api.example.com'

    def test_stripping_is_idempotent(self):
        once = Session('https://api.example.com/').base_url
        twice = Session(once).base_url
        assert once == twice == 'https://api.example.com'

    def test_token_sets_authorization_header(self):
        session = Session('https://api.example.com', 'my-token')
        assert session.token == 'my-token'
        assert session.get_client().headers['Authorization'] == 'Bearer my-token'

    def test_set_token_rebuilds_transport(self):
        """A new transport object carrying the new header after every set_token."""
        session = Session('https://x')
        a = session.get_client()
        session.set_token('t')
        b = session.get_client()

        assert a is not b
        assert b.headers['Authorization'] == 'Bearer t'
        assert 'Authorization' not in a.headers

        session.set_token('t2')
        c = session.get_client()
        assert c is not b
        assert c.headers['Authorization'] == 'Bearer t2'
        # The old transport keeps its own token
        assert b.headers['Authorization'] == 'Bearer t'

    def test_set_token_keeps_client_options(self):
        session = Session('https://x', client_options={'timeout': 7, 'headers': {'X-Tenant': 'acme'}})
        session.set_token('t')
        client = session.get_client()
        assert client.timeout == 7
        assert client.headers['X-Tenant'] == 'acme'
        assert client.headers['Accept'] == 'application/json'

    def test_set_log_file_rebuilds_transport(self, tmp_path):
        log_file = str(tmp_path / 'requests.log')
        session = Session('https://x', 'tok')
        before = session.get_client()

        session.set_log_file(log_file)
        after = session.get_client()

        assert after is not before
        assert session.get_log_file() == log_file
        assert after.log_file == log_file
        assert after.headers['Authorization'] == 'Bearer tok'

        session.set_log_file(None)
        assert session.get_client().log_file is None

    def test_unknown_option_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            Session('https://x', client_options={'http_errors': True})
        assert 'http_errors' in str(exc_info.value)

    def test_adapter_option_shared_across_rebuilds(self):
        adapter = FakeAdapter().add(200, {}).add(200, {})
        session = Session('https://x', client_options={'adapter': adapter})

        session.get_client().get('/a')
        session.set_token('t')
        session.get_client().get('/b')

        assert [r.url for r in adapter.requests] == ['https://x/a', 'https://x/b']
        assert adapter.last_request.headers['Authorization'] == 'Bearer t'

    def test_failed_log_file_change_leaves_session_untouched(self, tmp_path):
        blocker = tmp_path / 'not-a-dir'
        blocker.write_text('')
        session = Session('https://x', 'old')
        before = session.get_client()

        with pytest.raises(ConfigurationError):
            session.set_log_file(str(blocker / 'http.log'))

        assert session.get_log_file() is None
        assert session.get_client() is before

        session.set_token('new')
        assert session.get_token() == 'new'
        assert session.get_client().headers['Authorization'] == 'Bearer new'

    def test_failed_token_change_leaves_session_untouched(self):
        session = Session('https://x', 'old')
        before = session.get_client()

        with patch('letspeppol.client.session.HttpTransport',
                   side_effect=ConfigurationError('Unable to open log file: x')):
            with pytest.raises(ConfigurationError):
                session.set_token('new')

        assert session.get_token() == 'old'
        assert session.get_client() is before
        assert before.headers['Authorization'] == 'Bearer old'
