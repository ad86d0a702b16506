import unittest

from contracts.command_contract import (
    COMMAND_NAME_ORDER,
    COMMAND_NAMES,
    COMMAND_REQUIRED_ARGUMENTS,
    COMMANDS_WITHOUT_ARGUMENTS,
    PROGRESS_COMMAND_NAMES,
    TASK_COMMAND_NAMES,
    TIMER_COMMAND_NAMES,
    WIDGET_COMMAND_NAMES,
)
from contracts.ui_protocol import STICKY_EVENT_ORDER, STICKY_EVENT_TYPES


class CommandContractConsistencyTests(unittest.TestCase):
    def test_command_name_order_has_no_duplicates(self) -> None:
        self.assertEqual(len(COMMAND_NAME_ORDER), len(set(COMMAND_NAME_ORDER)))

    def test_command_groups_partition_all_commands(self) -> None:
        groups = (
            TIMER_COMMAND_NAMES,
            TASK_COMMAND_NAMES,
            WIDGET_COMMAND_NAMES,
            PROGRESS_COMMAND_NAMES,
        )
        self.assertEqual(COMMAND_NAMES, frozenset().union(*groups))
        self.assertEqual(len(COMMAND_NAMES), sum(len(group) for group in groups))

    def test_argument_tables_reference_known_commands(self) -> None:
        self.assertLessEqual(set(COMMAND_REQUIRED_ARGUMENTS), set(COMMAND_NAMES))
        self.assertLessEqual(COMMANDS_WITHOUT_ARGUMENTS, COMMAND_NAMES)
        self.assertEqual(
            set(),
            set(COMMAND_REQUIRED_ARGUMENTS) & set(COMMANDS_WITHOUT_ARGUMENTS),
        )

    def test_sticky_order_covers_sticky_types(self) -> None:
        self.assertEqual(set(STICKY_EVENT_TYPES), set(STICKY_EVENT_ORDER))


if __name__ == "__main__":
    unittest.main()
