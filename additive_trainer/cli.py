#!filepath: additive_trainer/cli.py
import typer
from rich import print

from additive_trainer import Logging, __version__
from additive_trainer.config.app_config import AppConfig
from additive_trainer.utils.errors import UserInputError

app = typer.Typer(help="Additive Model Trainer CLI")


@app.command()
def version():
    print(f"v{__version__}")


@app.command()
def train(
        config: str = typer.Argument(..., help="YAML config with a 'trainer' section"),
        data: str = typer.Argument(..., help="Parquet file of pointwise examples"),
        label_column: str = typer.Option("label", help="Column holding the raw label"),
        run_id: str = typer.Option(None, help="Run identifier (random if omitted)"),
):
    """
    训练 additive model，并在每轮后写 checkpoint
    """
    from additive_trainer.dataset import load_examples
    from additive_trainer.workflows.additive_training import train as run_training

    try:
        cfg = AppConfig.load(config)
        Logging.from_config(cfg.log)

        examples = load_examples(
            data, rank_key=cfg.trainer.rank_key, label_column=label_column
        )
    except UserInputError as e:
        print(f"[red]{e}[/red]")
        raise typer.Exit(code=1)

    print(f"[green]Training {cfg.trainer.loss} additive model on {len(examples)} examples[/green]")
    model = run_training(examples, cfg.trainer, run_id=run_id)
    print(f"[blue]Done: {len(model)} functions -> {cfg.trainer.model_output}[/blue]")


if __name__ == "__main__":
    app()

# python -m additive_trainer.cli train config.yml data.parquet
