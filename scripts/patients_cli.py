#!/usr/bin/env python3
"""Interactive console for a running patient service."""

import sys

import httpx
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table


class PatientsCLI:
    """Interactive console for listing, creating and deleting patients."""

    def __init__(self, base_url: str = "http://localhost:4000"):
        """Initialize patients CLI."""
        self.base_url = base_url
        self.console = Console()
        self.client = httpx.Client(base_url=base_url, timeout=30.0)

    def start(self) -> None:
        """Start the interactive session."""
        self.console.print(
            Panel.fit(
                "[bold blue]Patient Service Console[/bold blue]\nCommands: list, create, delete, help, quit",
                border_style="blue",
            )
        )

        if not self._test_connection():
            self.console.print(f"[red]Cannot connect to the service at {self.base_url}.[/red]")
            return

        try:
            while True:
                command = Prompt.ask("\n[bold cyan]patients[/bold cyan]").strip().lower()

                if command in ["quit", "exit"]:
                    break
                elif command == "list":
                    self._list_patients()
                elif command == "create":
                    self._create_patient()
                elif command == "delete":
                    self._delete_patient()
                elif command == "help":
                    self._show_help()
                elif command:
                    self.console.print(f"[yellow]Unknown command: {command}[/yellow]")

        except KeyboardInterrupt:
            pass
        finally:
            self.console.print("\n[yellow]Goodbye![/yellow]")
            self.client.close()

    def _test_connection(self) -> bool:
        """Test connection to the service."""
        try:
            response = self.client.get("/health")
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    def _list_patients(self) -> None:
        response = self.client.get("/patients")
        if response.status_code != 200:
            self._show_error(response)
            return

        table = Table(title="Patients")
        for column in ["ID", "Name", "Email", "Address", "Date of birth"]:
            table.add_column(column)
        for patient in response.json():
            table.add_row(
                patient["id"], patient["name"], patient["email"], patient["address"], patient["date_of_birth"]
            )

        self.console.print(table)

    def _create_patient(self) -> None:
        payload = {
            "name": Prompt.ask("Name"),
            "email": Prompt.ask("Email"),
            "address": Prompt.ask("Address"),
            "date_of_birth": Prompt.ask("Date of birth (YYYY-MM-DD)"),
        }

        response = self.client.post("/patients", json=payload)
        if response.status_code == 201:
            self.console.print(f"[green]Created patient {response.json()['id']}[/green]")
        else:
            self._show_error(response)

    def _delete_patient(self) -> None:
        patient_id = Prompt.ask("Patient ID")

        response = self.client.delete(f"/patients/{patient_id}")
        if response.status_code == 204:
            self.console.print(f"[green]Deleted patient {patient_id}[/green]")
        else:
            self._show_error(response)

    def _show_error(self, response: httpx.Response) -> None:
        """Print an API error, flagging records left behind by a failed create."""
        detail = response.json().get("detail") if response.content else None
        self.console.print(f"[red]API Error: {response.status_code} - {detail}[/red]")

        if isinstance(detail, dict) and detail.get("patient_id"):
            self.console.print(
                f"[yellow]Patient {detail['patient_id']} was stored but not fully provisioned.[/yellow]"
            )

    def _show_help(self) -> None:
        """Show help information."""
        help_text = """
[bold]Available Commands:[/bold]
• list - Show all patients
• create - Create a patient (prompts for each field)
• delete - Delete a patient by ID
• quit or exit - Leave the console
        """

        self.console.print(Panel(help_text.strip(), title="[cyan]Help[/cyan]", border_style="cyan"))


def main():
    """Main entry point for the patients CLI."""
    base_url = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:4000"

    cli = PatientsCLI(base_url)
    cli.start()


if __name__ == "__main__":
    main()
