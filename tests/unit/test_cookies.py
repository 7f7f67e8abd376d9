'''
Unit tests for cookie helpers and log masking.
'''

from __future__ import annotations

from lingxi2api.auth import merge_cookies, parse_cookie_header, parse_set_cookie, serialize_cookies
from lingxi2api.core import mask_cookie, truncate_text


class TestCookieParsing:
    '''
    Test Cookie and Set-Cookie parsing.
    '''

    def test_parse_cookie_header(self) -> None:
        assert parse_cookie_header('wps_sid=abc; csrf=x=y;  ; flag') == {
            'wps_sid': 'abc',
            'csrf': 'x=y',
        }

    def test_parse_set_cookie_drops_attributes(self) -> None:
        header = 'wps_sid=new; Path=/; Domain=.wps.cn; HttpOnly; Expires=Wed, 21 Oct 2026 07:28:00 GMT'

        assert parse_set_cookie(header) == ('wps_sid', 'new')

    def test_parse_set_cookie_without_pair(self) -> None:
        assert parse_set_cookie('HttpOnly') is None
        assert parse_set_cookie('') is None

    def test_serialize(self) -> None:
        assert serialize_cookies({'a': '1', 'b': '2'}) == 'a=1; b=2'


class TestMergeCookies:
    '''
    Test folding Set-Cookie headers into a cookie string.
    '''

    def test_new_value_overrides_in_place(self) -> None:
        merged = merge_cookies('wps_sid=old; csrf=x', ['wps_sid=new; Path=/'])

        assert merged == 'wps_sid=new; csrf=x'

    def test_new_names_are_appended(self) -> None:
        assert merge_cookies('wps_sid=old', ['uid=7; HttpOnly']) == 'wps_sid=old; uid=7'

    def test_merge_into_empty_cookie(self) -> None:
        assert merge_cookies('', ['wps_sid=new']) == 'wps_sid=new'

    def test_invalid_headers_are_ignored(self) -> None:
        assert merge_cookies('a=1', ['garbage', '=nameless']) == 'a=1'

    def test_merge_is_idempotent(self) -> None:
        headers = ['wps_sid=new; Path=/', 'uid=7', 'csrf=rotated; Secure']

        once = merge_cookies('wps_sid=old; csrf=x', headers)
        twice = merge_cookies(once, headers)

        assert once == twice == 'wps_sid=new; csrf=rotated; uid=7'

    def test_no_headers_keeps_cookie(self) -> None:
        assert merge_cookies('a=1; b=2', []) == 'a=1; b=2'


class TestMasking:
    '''
    Test masking of values written to diagnostic logs.
    '''

    def test_mask_cookie_keeps_names_and_prefix(self) -> None:
        assert mask_cookie('wps_sid=abcdef123456; csrf=xy') == 'wps_sid=abcd***; csrf=xy***'

    def test_mask_empty_cookie(self) -> None:
        assert mask_cookie('') == ''

    def test_mask_never_reveals_full_value(self) -> None:
        secret = 'V02S9xSecretValue00'

        assert secret not in mask_cookie(f'wps_sid={secret}')

    def test_truncate_short_text(self) -> None:
        assert truncate_text('short') == 'short'

    def test_truncate_counts_dropped_chars(self) -> None:
        text = 'x' * 250

        assert truncate_text(text) == 'x' * 200 + '...(+50 chars)'
        assert truncate_text('abcdef', max_length=2) == 'ab...(+4 chars)'
