'''
Unit tests for the Lingxi event stream parser.
'''

from __future__ import annotations

from typing import List, Tuple

import pytest

from lingxi2api.core import FrameDecodeError
from lingxi2api.models import PartKind, SemanticPart
from lingxi2api.services import SSEFrameParser, classify_event, decode_frame, parse_frame


STREAM = (
    'event: message\ndata: {"type":"reasoning","data":"先想一想"}\n\n'
    'event: message\ndata: {"type":"reasoning_end"}\n\n'
    'data: {"type":"text_start","data":{"text":"你好"}}\n\n'
    'data: {"type":"text","data":", world"}\n\n'
    'data: {"type":"recommend","data":["a","b"]}\n\n'
    'data: {broken\n\n'
    'data: {"type":"end"}\n\n'
).encode('utf-8')


def describe(outcomes) -> List[Tuple[str, str]]:
    '''
    Comparable view of parser outcomes.
    '''
    return [
        ('error', outcome.message) if isinstance(outcome, FrameDecodeError)
        else (outcome.kind.value, outcome.text)
        for outcome in outcomes
    ]


class TestClassifyEvent:
    '''
    Test mapping of decoded events onto semantic parts.
    '''

    def test_reasoning_with_string_data(self) -> None:
        assert classify_event({'type': 'reasoning', 'data': 'hmm'}) == SemanticPart(
            PartKind.REASONING, 'hmm'
        )

    def test_reasoning_with_nested_text(self) -> None:
        assert classify_event({'type': 'reasoning', 'data': {'text': 'hmm'}}) == SemanticPart(
            PartKind.REASONING, 'hmm'
        )

    def test_reasoning_end_is_a_marker(self) -> None:
        part = classify_event({'type': 'reasoning_end', 'data': 'ignored'})

        assert part.kind is PartKind.REASONING_END
        assert part.text == ''

    @pytest.mark.parametrize('event_type', ['text', 'text_start', 'text_end'])
    def test_text_types(self, event_type: str) -> None:
        assert classify_event({'type': event_type, 'data': 'B'}) == SemanticPart(PartKind.TEXT, 'B')

    @pytest.mark.parametrize(
        'event_type', ['recommend', 'recommend_start', 'recommend_end', 'ping', 'end', 'unknown']
    )
    def test_ignored_types(self, event_type: str) -> None:
        assert classify_event({'type': event_type, 'data': 'x'}).kind is PartKind.OTHER

    def test_missing_type(self) -> None:
        assert classify_event({'data': 'x'}).kind is PartKind.OTHER

    def test_non_text_data_yields_empty_text(self) -> None:
        assert classify_event({'type': 'text', 'data': ['x']}) == SemanticPart(PartKind.TEXT, '')


class TestDecodeFrame:
    '''
    Test strict decoding of a single frame.
    '''

    def test_event_line_before_data(self) -> None:
        assert decode_frame('event: message\ndata: {"type":"text","data":"B"}') == {
            'type': 'text',
            'data': 'B',
        }

    def test_bare_json_frame(self) -> None:
        assert decode_frame('{"type":"ping"}') == {'type': 'ping'}

    def test_multiline_data_is_joined(self) -> None:
        frame = 'data: {"type":"text",\ndata: "data":"B"}'

        assert decode_frame(frame) == {'type': 'text', 'data': 'B'}

    def test_frame_without_json_object(self) -> None:
        result = decode_frame('event: ping\ndata: keep-alive')

        assert isinstance(result, FrameDecodeError)
        assert result.frame == 'event: ping\ndata: keep-alive'

    def test_malformed_json(self) -> None:
        result = decode_frame('data: {"type": "text", "data": }')

        assert isinstance(result, FrameDecodeError)
        assert result.message.startswith('Malformed JSON')

    def test_array_payload_is_rejected(self) -> None:
        assert isinstance(decode_frame('data: [1, 2]'), FrameDecodeError)

    def test_parse_frame_returns_error_as_value(self) -> None:
        assert isinstance(parse_frame('data: nope'), FrameDecodeError)


class TestSSEFrameParser:
    '''
    Test buffering and frame splitting.
    '''

    def test_single_read(self) -> None:
        described = describe(SSEFrameParser().feed(STREAM))

        assert described[:5] == [
            ('reasoning', '先想一想'),
            ('reasoning_end', ''),
            ('text', '你好'),
            ('text', ', world'),
            ('other', ''),
        ]
        assert described[5][0] == 'error'
        assert described[6] == ('other', '')

    def test_malformed_frame_does_not_stop_parsing(self) -> None:
        outcomes = SSEFrameParser().feed(STREAM)

        assert len(outcomes) == 7
        assert isinstance(outcomes[5], FrameDecodeError)
        assert outcomes[6].kind is PartKind.OTHER

    def test_split_at_every_byte(self) -> None:
        expected = describe(SSEFrameParser().feed(STREAM))

        for index in range(len(STREAM) + 1):
            parser = SSEFrameParser()
            outcomes = parser.feed(STREAM[:index]) + parser.feed(STREAM[index:])

            assert describe(outcomes) == expected, f'split at byte {index}'
            assert parser.pending == ''

    def test_byte_by_byte(self) -> None:
        parser = SSEFrameParser()
        outcomes = []
        for index in range(len(STREAM)):
            outcomes.extend(parser.feed(STREAM[index:index + 1]))

        assert describe(outcomes) == describe(SSEFrameParser().feed(STREAM))

    def test_incomplete_frame_stays_buffered(self) -> None:
        parser = SSEFrameParser()

        assert parser.feed(b'data: {"type":"text","data":"B"}\n') == []
        assert parser.pending == 'data: {"type":"text","data":"B"}\n'
        assert parser.feed(b'\n') == [SemanticPart(PartKind.TEXT, 'B')]

    def test_crlf_line_endings(self) -> None:
        parser = SSEFrameParser()

        outcomes = parser.feed(b'event: message\r\ndata: {"type":"text","data":"B"}\r\n\r\n')

        assert outcomes == [SemanticPart(PartKind.TEXT, 'B')]

    def test_crlf_split_between_reads(self) -> None:
        parser = SSEFrameParser()

        first = parser.feed(b'data: {"type":"text","data":"B"}\r\n\r')
        second = parser.feed(b'\n')

        assert first + second == [SemanticPart(PartKind.TEXT, 'B')]

    def test_blank_frames_are_skipped(self) -> None:
        assert SSEFrameParser().feed(b'\n\n\n\n  \n\n') == []

    def test_accepts_text(self) -> None:
        assert SSEFrameParser().feed('data: {"type":"text","data":"B"}\n\n') == [
            SemanticPart(PartKind.TEXT, 'B')
        ]
