"""CLI entry point for Guesswork."""

import json

import click

from guesswork.config.settings import AVATARS, LOG_LEVELS, Settings, configure_logging


@click.group(invoke_without_command=True)
@click.option("--log-level", type=click.Choice(LOG_LEVELS, case_sensitive=False), default=None,
              help="Override the configured log level")
@click.pass_context
def main(ctx: click.Context, log_level: str | None) -> None:
    """Guesswork — adaptive number-guessing game."""
    settings = Settings.load()
    configure_logging(log_level or settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings
    if ctx.invoked_subcommand is None:
        ctx.invoke(play)


@main.command()
@click.pass_context
def play(ctx: click.Context) -> None:
    """Launch the terminal game."""
    from guesswork.app.main_app import GuessworkApp

    app = GuessworkApp(settings=ctx.obj["settings"])
    app.run()


@main.command()
@click.option("--level", "level_number", default=1, show_default=True, type=click.IntRange(min=1))
@click.option("--seed", type=int, default=None, help="Seed for a reproducible level")
@click.option("--skill", default=50.0, show_default=True, type=click.FloatRange(10, 100))
@click.option("--consistency", default=0.5, show_default=True, type=click.FloatRange(0, 1))
@click.option("--failure-streak", default=0, show_default=True, type=click.IntRange(min=0))
@click.option("--as-json", "as_json", is_flag=True, help="Print the level as JSON")
def level(
    level_number: int,
    seed: int | None,
    skill: float,
    consistency: float,
    failure_streak: int,
    as_json: bool,
) -> None:
    """Generate and print the parameters of one level."""
    from guesswork.engine.levels import generate_level, mode_description
    from guesswork.engine.skill import SkillMetrics

    metrics = SkillMetrics(
        skill_level=skill,
        consistency_score=consistency,
        failure_streak=failure_streak,
    )
    params = generate_level(level_number, metrics, seed=seed)

    if as_json:
        click.echo(json.dumps(params.to_dict(), indent=2))
        return

    limit = f"{params.time_limit}s" if params.time_limit else "none"
    click.echo(f"  Level {params.level_number} [{params.game_mode.value}] seed={params.seed}")
    click.echo(f"  {mode_description(params.game_mode)}")
    click.echo(f"  Range {params.range_min}..{params.range_max}, {params.max_attempts} attempts, time limit {limit}")
    click.echo(f"  Hints: {params.hint_style.value}, difficulty {params.difficulty_score}")


@main.command()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Show stored player statistics and skill metrics."""
    from guesswork.engine.skill import derive_skill_metrics, skill_level_name
    from guesswork.state.store import ProfileStore

    settings = ctx.obj["settings"]
    store = ProfileStore(db_path=settings.db_path)
    player = store.load_stats()
    metrics = derive_skill_metrics(player, store.load_history(limit=10))

    rate = player.total_wins / player.total_games * 100 if player.total_games else 0
    click.echo(f"  {settings.profile.display_name}: {skill_level_name(metrics.skill_level)} "
               f"(skill {metrics.skill_level:.0f})")
    click.echo(f"  Games {player.total_games}, wins {player.total_wins} ({rate:.0f}%), "
               f"best streak {player.best_streak}")
    click.echo(f"  Average attempts {player.average_attempts:.1f}")
    for mode, mode_stats in player.mode_stats.items():
        if mode_stats.games_played:
            click.echo(f"    {mode.value}: {mode_stats.wins}/{mode_stats.games_played} won, "
                       f"avg {mode_stats.average_attempts:.1f} attempts")


@main.command()
@click.confirmation_option(prompt="Erase all stats, history and the saved game?")
@click.pass_context
def reset(ctx: click.Context) -> None:
    """Erase stored progress."""
    from guesswork.state.store import ProfileStore

    ProfileStore(db_path=ctx.obj["settings"].db_path).reset()
    click.echo("Progress reset.")


@main.command()
@click.option("--name", default=None, help="Display name")
@click.option("--avatar", type=click.Choice(AVATARS), default=None, help="Avatar emblem")
@click.option("--sound/--no-sound", default=None, help="Ring the bell when a level ends")
@click.pass_context
def profile(ctx: click.Context, name: str | None, avatar: str | None, sound: bool | None) -> None:
    """Show the player profile, or update and save it."""
    settings = ctx.obj["settings"]
    if name is not None or avatar is not None or sound is not None:
        settings.update_profile(
            display_name=name,
            avatar_id=AVATARS.index(avatar) if avatar else None,
            sound_enabled=sound,
        )
        click.echo(f"Saved to {settings.data_dir / 'config.yaml'}")

    p = settings.profile
    click.echo(f"  Name:   {p.display_name}")
    click.echo(f"  Avatar: {p.avatar}")
    click.echo(f"  Sound:  {'on' if p.sound_enabled else 'off'}")
