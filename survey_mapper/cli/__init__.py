import click

from .commands.automap import automap_command
from .commands.corrections import apply_corrections_command
from .commands.mappings import (
    create_mapping_command,
    delete_mapping_command,
    forget_command,
    learn_command,
    list_learned_command,
    list_mappings_command,
    list_unmapped_command,
    reset_command,
)


@click.group()
def app() -> None:
    pass


app.add_command(automap_command, name="automap")
app.add_command(list_mappings_command, name="mappings")
app.add_command(create_mapping_command, name="create")
app.add_command(delete_mapping_command, name="delete")
app.add_command(list_learned_command, name="learned")
app.add_command(learn_command, name="learn")
app.add_command(forget_command, name="forget")
app.add_command(list_unmapped_command, name="unmapped")
app.add_command(apply_corrections_command, name="apply-corrections")
app.add_command(reset_command, name="reset")
__all__ = ["app"]
