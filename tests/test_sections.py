"""Tests for the input state machine, the message log and the title bar.

Painters are checked for exact grid shape since the compositor relies on it.
"""

import socket
import unittest
from unittest import mock

from uifakes import key, named, typed

from hexcat.errors import StreamWriteError
from hexcat.sections import (
    BLANK_ROW,
    PROMPT,
    InputState,
    Message,
    MessageLog,
    Origin,
    Title,
    fit,
)


def type_into(state: InputState, text: str) -> None:
    for k in typed(text):
        state.handle_key(k)


class InputStateTests(unittest.TestCase):
    def test_scenario_two_bytes_with_space(self) -> None:
        state = InputState()
        type_into(state, "41 42")
        self.assertEqual(state.text, "41 42")
        self.assertEqual(state.cursor, 5)

        self.assertEqual(state.commit(), bytes([0x41, 0x42]))
        self.assertEqual(state.text, "")
        self.assertEqual((state.cursor, state.scroll), (0, 0))

    def test_even_digit_counts_decode_to_half_as_many_bytes(self) -> None:
        for text in ("00", "de ad be ef", "0 1 2 3", "a" * 64):
            state = InputState()
            type_into(state, text)
            payload = state.commit()
            digits = text.replace(" ", "")
            self.assertEqual(payload, bytes.fromhex(digits))
            self.assertEqual(len(payload), len(digits) // 2)
            self.assertEqual(state.chars, [])

    def test_odd_digit_count_is_rejected_and_buffer_kept(self) -> None:
        for text in ("4", "41 4", "abc"):
            state = InputState()
            type_into(state, text)
            before = (list(state.chars), state.cursor, state.scroll)
            self.assertIsNone(state.commit())
            self.assertIsNone(state.commit())
            self.assertEqual((state.chars, state.cursor, state.scroll), before)

    def test_buffer_without_digits_is_not_committed(self) -> None:
        state = InputState()
        type_into(state, "  ")
        self.assertIsNone(state.commit())
        self.assertEqual(state.text, "  ")

    def test_only_hex_digits_and_whitespace_are_typed(self) -> None:
        state = InputState()
        self.assertTrue(state.handle_key(key("F")))
        self.assertTrue(state.handle_key(named("KEY_TAB", "\t")))
        self.assertFalse(state.handle_key(key("g")))
        self.assertFalse(state.handle_key(key("\x03")))
        self.assertFalse(state.handle_key(named("KEY_ENTER", "\r")))
        self.assertFalse(state.handle_key(named("KEY_F1")))
        self.assertEqual(state.text, "F ")

    def test_backspace_on_empty_buffer_is_a_no_op(self) -> None:
        state = InputState()
        self.assertFalse(state.handle_key(named("KEY_BACKSPACE", "\x7f")))
        self.assertEqual((state.chars, state.cursor), ([], 0))

    def test_backspace_removes_character_before_cursor(self) -> None:
        state = InputState()
        type_into(state, "abc")
        state.handle_key(named("KEY_LEFT"))
        self.assertTrue(state.handle_key(key("\x7f")))
        self.assertEqual(state.text, "ac")
        self.assertEqual(state.cursor, 1)

    def test_delete_removes_character_under_cursor(self) -> None:
        state = InputState()
        type_into(state, "abc")
        self.assertFalse(state.handle_key(named("KEY_DELETE")))
        state.handle_key(named("KEY_HOME"))
        self.assertTrue(state.handle_key(named("KEY_DELETE")))
        self.assertEqual(state.text, "bc")
        self.assertEqual(state.cursor, 0)

    def test_typing_inserts_at_cursor(self) -> None:
        state = InputState()
        type_into(state, "ac")
        state.handle_key(named("KEY_LEFT"))
        state.handle_key(key("b"))
        self.assertEqual(state.text, "abc")
        self.assertEqual(state.cursor, 2)

    def test_cursor_movement_stays_within_bounds(self) -> None:
        state = InputState()
        self.assertFalse(state.handle_key(named("KEY_LEFT")))
        self.assertFalse(state.handle_key(named("KEY_RIGHT")))
        type_into(state, "12")
        self.assertFalse(state.handle_key(named("KEY_RIGHT")))
        self.assertFalse(state.handle_key(named("KEY_END")))
        self.assertTrue(state.handle_key(named("KEY_LEFT")))
        self.assertTrue(state.handle_key(named("KEY_LEFT")))
        self.assertFalse(state.handle_key(named("KEY_LEFT")))
        self.assertTrue(state.handle_key(named("KEY_END")))
        self.assertEqual(state.cursor, 2)

    def test_home_always_resets_cursor_and_scroll(self) -> None:
        state = InputState(chars=list("0123456789"), cursor=10, scroll=4)
        self.assertTrue(state.handle_key(named("KEY_HOME")))
        self.assertEqual((state.cursor, state.scroll), (0, 0))
        self.assertFalse(state.handle_key(named("KEY_HOME")))

    def test_long_input_scrolls_to_keep_cursor_visible(self) -> None:
        state = InputState()
        width = 20
        window = InputState.window(width)
        self.assertEqual(window, width - len(PROMPT) - 1)

        type_into(state, "0123456789abcde")
        state.scroll_into_view(width)
        self.assertEqual(state.scroll, 15 - window)
        self.assertEqual(state.cursor_column(width), width - 1)

        row = state.paint(width, 2)[1]
        self.assertEqual(row, fit(PROMPT + "0123456789abcde"[15 - window:], width))
        self.assertEqual(len(row), width)

        for _ in range(3):
            state.handle_key(named("KEY_LEFT"))
        state.scroll_into_view(width)
        self.assertEqual(state.cursor_column(width), len(PROMPT) + window - 3)

        state.handle_key(named("KEY_HOME"))
        state.scroll_into_view(width)
        self.assertEqual(state.cursor_column(width), len(PROMPT))
        self.assertEqual(state.paint(width, 2)[1], fit(PROMPT + "012345678", width))

    def test_scroll_shrinks_back_when_text_is_deleted(self) -> None:
        state = InputState()
        type_into(state, "0123456789abcde")
        state.scroll_into_view(20)
        for _ in range(10):
            state.handle_key(key("\x7f"))
        state.scroll_into_view(20)
        self.assertEqual(state.scroll, 0)
        self.assertLessEqual(state.cursor, len(state.chars))

    def test_cursor_column_never_leaves_a_narrow_screen(self) -> None:
        state = InputState()
        type_into(state, "1234")
        state.scroll_into_view(6)
        self.assertEqual(state.cursor_column(6), 5)

    def test_paint_shape(self) -> None:
        state = InputState()
        rows = state.paint(30, 2)
        self.assertEqual(rows[0], "─" * 8 + "┼" + "─" * 21)
        self.assertEqual(rows[1], fit(PROMPT, 30))
        self.assertEqual(state.paint(30, 4)[2:], [" " * 30] * 2)


class MessageLogTests(unittest.TestCase):
    def test_render_window_is_always_height_by_width(self) -> None:
        for count in (0, 3, 50):
            log = MessageLog(mock.Mock())
            for i in range(count):
                log.append(Message(Origin.REMOTE, bytes([i])))
            for width in (1, 5, 40, 120):
                for height in (1, 2, 5, 10):
                    rows = log.render_window(width, height)
                    self.assertEqual(len(rows), height)
                    self.assertTrue(all(len(row) == width for row in rows))

    def test_zero_height_renders_nothing(self) -> None:
        self.assertEqual(MessageLog(mock.Mock()).render_window(40, 0), [])

    def test_local_message_is_prefixed_and_hex_dumped(self) -> None:
        log = MessageLog(mock.Mock())
        log.append(Message(Origin.LOCAL, b"AB"))
        log.append(Message(Origin.REMOTE, b"\x00\xff"))
        rows = log.render_window(40, 4)
        self.assertEqual(rows[0], fit("  LOCAL │ 41 42", 40))
        self.assertEqual(rows[1], fit(" REMOTE │ 00 ff", 40))
        self.assertEqual(rows[2], fit(BLANK_ROW, 40))
        self.assertEqual(rows[3], "─" * 8 + "┼" + "─" * 31)

    def test_long_payload_is_truncated_to_width(self) -> None:
        log = MessageLog(mock.Mock())
        log.append(Message(Origin.LOCAL, b"\x3c" * 30))
        row = log.render_window(40, 2)[0]
        self.assertEqual(len(row), 40)
        self.assertEqual(row, "  LOCAL │ " + "3c " * 10)

    def test_window_shows_newest_messages_last(self) -> None:
        log = MessageLog(mock.Mock())
        for i in range(10):
            log.append(Message(Origin.REMOTE, bytes([i])))
        rows = log.render_window(20, 5)
        self.assertEqual([row.split("│ ")[1].strip() for row in rows[:4]], ["06", "07", "08", "09"])

    def test_local_append_writes_payload_to_connection(self) -> None:
        a, b = socket.socketpair()
        with a, b:
            log = MessageLog(a)
            log.append(Message(Origin.LOCAL, b"\x41\x42"))
            self.assertEqual(b.recv(16), b"AB")
        self.assertEqual(len(log), 1)

    def test_remote_append_does_not_write(self) -> None:
        writer = mock.Mock()
        log = MessageLog(writer)
        log.append(Message(Origin.REMOTE, b"x"))
        writer.sendall.assert_not_called()

    def test_write_failure_is_reported_but_message_kept(self) -> None:
        writer = mock.Mock()
        writer.sendall.side_effect = BrokenPipeError("broken pipe")
        log = MessageLog(writer)
        with self.assertRaises(StreamWriteError) as cm:
            log.append(Message(Origin.LOCAL, b"\x01"))
        self.assertIsInstance(cm.exception.__cause__, BrokenPipeError)
        self.assertEqual(log.messages, [Message(Origin.LOCAL, b"\x01")])

    def test_scroll_page_moves_through_history_and_clamps(self) -> None:
        log = MessageLog(mock.Mock())
        for i in range(20):
            log.append(Message(Origin.REMOTE, bytes([i])))
        height = 6  # five message rows, pages of four

        self.assertFalse(log.scroll_page(1, height))
        self.assertTrue(log.scroll_page(-1, height))
        self.assertEqual(log.scroll, 4)
        self.assertEqual(log.render_window(20, height)[0].split("│ ")[1].strip(), "0b")

        for _ in range(10):
            log.scroll_page(-1, height)
        self.assertEqual(log.scroll, 15)
        self.assertEqual(log.render_window(20, height)[0].split("│ ")[1].strip(), "00")

        while log.scroll_page(1, height):
            pass
        self.assertEqual(log.scroll, 0)

    def test_scrolled_back_view_stays_put_when_messages_arrive(self) -> None:
        log = MessageLog(mock.Mock())
        for i in range(20):
            log.append(Message(Origin.REMOTE, bytes([i])))
        log.scroll_page(-1, 6)
        before = log.render_window(20, 6)
        log.append(Message(Origin.REMOTE, b"\xee"))
        self.assertEqual(log.render_window(20, 6), before)


class TitleTests(unittest.TestCase):
    def test_banner_and_divider(self) -> None:
        title = Title(peer=("127.0.0.1", 7))
        rows = title.paint(60, 3)
        self.assertEqual(rows[0], fit("HexCat. Connected to 127.0.0.1 (on port 7). Ctrl-C to quit.", 60))
        self.assertEqual(rows[1], "─" * 8 + "┬" + "─" * 51)
        self.assertEqual(rows[2], " " * 60)

    def test_status_note_is_shown(self) -> None:
        title = Title(peer=("::1", 9000), status="send failed")
        self.assertIn("[send failed]", title.paint(120, 2)[0])

    def test_narrow_title_is_truncated(self) -> None:
        rows = Title(peer=("10.0.0.1", 80)).paint(5, 2)
        self.assertEqual(rows, ["HexCa", "─────"])
