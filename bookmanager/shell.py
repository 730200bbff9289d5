"""Interactive command loop over the book manager."""
import logging
import shlex

from bookmanager.manager import BookManager
from bookmanager.models import BOOK_FIELDS, Message
from bookmanager.render import render

logger = logging.getLogger(__name__)

HELP = """Commands:
  set FIELD VALUE   fill a form field ({fields})
  save              add, or update when editing
  add | update      run that action directly
  edit ID           load a listed book into the form
  cancel            clear the form and leave edit mode
  delete ID         delete a book
  fetch ID          look up a single book
  list              refresh the book list
  show              redraw the screen
  help              this text
  quit              exit""".format(fields=", ".join(BOOK_FIELDS))


class Shell:
    """Reads commands, calls manager handlers, prints the redrawn view."""

    def __init__(self, manager: BookManager, output=print):
        self.manager = manager
        self.output = output

    def execute(self, line: str) -> bool:
        """
        Run one command line.

        Returns:
            False when the shell should exit
        """
        try:
            parts = shlex.split(line)
        except ValueError as e:
            self.output(f"Could not parse command: {e}")
            return True

        if not parts:
            return True

        command, args = parts[0].lower(), parts[1:]
        m = self.manager

        if command in ("quit", "exit"):
            return False
        if command == "help":
            self.output(HELP)
            return True

        if command == "set":
            if len(args) < 2 or args[0] not in BOOK_FIELDS:
                self.output(f"Usage: set FIELD VALUE  (FIELD is one of {', '.join(BOOK_FIELDS)})")
                return True
            m.handle_change(args[0], " ".join(args[1:]))
        elif command == "save":
            m.submit()
        elif command == "add":
            m.add_book()
        elif command == "update":
            m.update_book()
        elif command == "cancel":
            m.reset_form()
        elif command == "list":
            m.fetch_all_books()
        elif command == "show":
            pass
        elif command in ("edit", "delete", "fetch") and len(args) != 1:
            self.output(f"Usage: {command} ID")
            return True
        elif command == "edit":
            record = m.find_listed(args[0])
            if record is None:
                m.message = Message.error(f"No listed book with ID {args[0]}")
            else:
                m.handle_edit(record)
        elif command == "delete":
            m.delete_book(args[0])
        elif command == "fetch":
            m.id_to_fetch = args[0]
            m.get_book_by_id()
        else:
            self.output(f"Unknown command: {command} (try 'help')")
            return True

        self.output(render(m))
        return True

    def run(self) -> None:
        """Mount the manager and loop until quit or end of input."""
        self.manager.mount()
        self.output(render(self.manager))
        self.output("Type 'help' for commands.")

        while True:
            try:
                line = input("books> ")
            except EOFError:
                break
            if not self.execute(line):
                break
        logger.info("Shell closed")
