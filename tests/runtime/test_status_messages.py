import unittest

from breaktimer import StateInfo
from runtime.messages import (
    format_duration,
    outcome_text,
    progress_percent,
    rejection_text,
    status_message,
)


def _snapshot(phase: str, remaining: int) -> StateInfo:
    return StateInfo(
        phase=phase,
        remaining_seconds=remaining,
        work_duration_seconds=1200,
        rest_duration_seconds=20,
    )


class StatusMessageTests(unittest.TestCase):
    def test_format_duration_pads_minutes_and_seconds(self) -> None:
        self.assertEqual("20:00", format_duration(1200))
        self.assertEqual("00:05", format_duration(5))
        self.assertEqual("00:00", format_duration(-3))

    def test_progress_uses_active_phase_duration(self) -> None:
        self.assertEqual(100.0, progress_percent(_snapshot("Stopped", 1200)))
        self.assertEqual(50.0, progress_percent(_snapshot("Running", 600)))
        self.assertEqual(25.0, progress_percent(_snapshot("Resting", 5)))

    def test_status_message_per_phase(self) -> None:
        self.assertEqual("Ready", status_message(_snapshot("Stopped", 1200)))
        self.assertEqual(
            "Working (19:59 until break)",
            status_message(_snapshot("Running", 1199)),
        )
        self.assertEqual("Paused (10:00 left)", status_message(_snapshot("Paused", 600)))
        self.assertEqual("Resting (00:20 left)", status_message(_snapshot("Resting", 20)))

    def test_rejection_text_falls_back_to_command_name(self) -> None:
        self.assertEqual("Not in a rest break.", rejection_text("skip_rest", "not_resting"))
        self.assertEqual(
            "Command 'start' was not applied.",
            rejection_text("start", "something_else"),
        )


    def test_outcome_text_flags_unsaved_break_count(self) -> None:
        self.assertIsNone(outcome_text("skip_rest", True, "skipped"))
        self.assertIn("could not be saved", outcome_text("skip_rest", True, "not_persisted"))
        self.assertEqual("Timer is not paused.", outcome_text("resume", False, "not_paused"))


if __name__ == "__main__":
    unittest.main()
