from textual.widgets import DataTable


class ResultsTable(DataTable):
    def on_mount(self) -> None:
        self.cursor_type = "row"
        self.zebra_stripes = False
        self.add_column("Card Name", width=32)
        self.add_column("Number", width=10)
        self.add_column("Set", width=24)
        self.add_column("Rarity", width=20)
        self.add_column("Variants", width=30)
