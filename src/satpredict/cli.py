"""
Command-line interface for satpredict.

This module provides a CLI for pass prediction, ephemerides and
visibility windows from TLE files.
"""

from datetime import datetime, timedelta
from typing import List, Optional, Tuple
import csv
import json
import logging
import sys

import click

from .config import PredictionConfig, load_config
from .observation import ObserverLocation
from .orbit import SatelliteOrbit
from .predictor import Predictor
from .utils import format_duration, get_current_utc, parse_datetime, setup_logging

logger = logging.getLogger(__name__)

TIME_FORMAT = '%Y-%m-%d %H:%M:%S'


def _load_orbit(tle: str, satellite: Optional[str]) -> SatelliteOrbit:
    if satellite:
        return SatelliteOrbit.from_tle_file(tle, satellite)
    return SatelliteOrbit.first_in_file(tle)


def _observer(values: Optional[Tuple[float, float, float]]) -> Optional[ObserverLocation]:
    if not values:
        return None
    return ObserverLocation.from_sequence(values)


def _window(start_time: Optional[str], duration: float) -> Tuple[datetime, datetime]:
    start_dt = parse_datetime(start_time) if start_time else get_current_utc()
    return start_dt, start_dt + timedelta(hours=duration)


def _fail(action: str, error: Exception) -> None:
    logger.error(f"{action} failed: {error}")
    raise click.ClickException(str(error))


tle_option = click.option('--tle', required=True, type=click.Path(exists=True),
                          help='Path to TLE file')
satellite_option = click.option('--satellite',
                                help='Satellite name (default: first entry in the TLE file)')
start_option = click.option('--start-time', type=str,
                            help='Start time (YYYY-MM-DD HH:MM:SS UTC, default: now)')
duration_option = click.option('--duration', default=24.0, type=float,
                               help='Analysis duration in hours (default: 24)')


def observer_option(required: bool):
    return click.option('--observer', required=required, nargs=3, type=float,
                        default=None, metavar='LAT LON ALT_KM',
                        help='Observer latitude, longitude (degrees) and altitude (km)')


@click.group()
@click.option('--log-level', default='INFO',
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR']),
              help='Set logging level')
@click.option('--log-file', type=click.Path(), help='Log file path')
@click.option('--config', 'config_path', type=click.Path(),
              help='YAML prediction config (default: $SATPREDICT_CONFIG)')
@click.pass_context
def main(ctx: click.Context, log_level: str, log_file: Optional[str],
         config_path: Optional[str]) -> None:
    """Satellite pass prediction - passes, ephemerides and visibility windows."""
    setup_logging(log_level, log_file)
    try:
        ctx.obj = load_config(config_path)
    except (FileNotFoundError, ValueError) as e:
        _fail("Loading config", e)


@main.command()
@tle_option
@satellite_option
@observer_option(required=False)
@click.option('--time', 'when', type=str,
              help='Observation time (YYYY-MM-DD HH:MM:SS UTC, default: now)')
@click.pass_obj
def position(config: PredictionConfig, tle: str, satellite: Optional[str],
             observer: Optional[Tuple[float, float, float]], when: Optional[str]) -> None:
    """Show where a satellite is at one instant."""
    try:
        orbit = _load_orbit(tle, satellite)
        when_dt = parse_datetime(when) if when else get_current_utc()
        result = Predictor(config).position_at(orbit, _observer(observer), when_dt)
    except (FileNotFoundError, ValueError) as e:
        _fail("Position", e)
        return

    if result is None:
        click.echo(f"No valid position for {orbit.satellite_name} at {when_dt}")
        return
    click.echo(json.dumps(result.to_dict(), indent=2))


@main.command()
@tle_option
@satellite_option
@observer_option(required=True)
@start_option
@duration_option
@click.option('--min-elevation', type=float,
              help='Minimum peak elevation in degrees (default: from config, 4)')
@click.option('--max-passes', type=int, help='Maximum number of passes')
@click.option('--format', 'output_format', default='table',
              type=click.Choice(['table', 'json']), help='Output format')
@click.pass_obj
def passes(config: PredictionConfig, tle: str, satellite: Optional[str],
           observer: Tuple[float, float, float], start_time: Optional[str],
           duration: float, min_elevation: Optional[float], max_passes: Optional[int],
           output_format: str) -> None:
    """List satellite passes over an observer."""
    try:
        orbit = _load_orbit(tle, satellite)
        start_dt, end_dt = _window(start_time, duration)
        transits = Predictor(config).transits(
            orbit, _observer(observer), start_dt, end_dt,
            min_elevation=min_elevation, max_transits=max_passes,
        )
    except (FileNotFoundError, ValueError) as e:
        _fail("Pass prediction", e)
        return

    if output_format == 'json':
        click.echo(json.dumps([t.to_dict() for t in transits], indent=2))
        return

    if not transits:
        click.echo(f"No passes found for {orbit.satellite_name} in the next {duration} hours")
        return

    click.echo(f"\n=== Passes of {orbit.satellite_name} ===")
    for t in transits:
        click.echo(
            f"{t.start.strftime(TIME_FORMAT)} -> {t.end.strftime(TIME_FORMAT)} UTC  "
            f"({format_duration(t.duration.total_seconds())})  "
            f"max {t.max_elevation:.1f}° at az {t.apex_azimuth:.1f}°"
        )


@main.command()
@tle_option
@satellite_option
@observer_option(required=False)
@start_option
@click.option('--duration', default=1.0, type=float,
              help='Ephemeris duration in hours (default: 1)')
@click.option('--interval', default=60.0, type=float,
              help='Sampling interval in seconds (default: 60)')
@click.option('--format', 'output_format', default='csv',
              type=click.Choice(['csv', 'json']), help='Output format')
@click.pass_obj
def ephemeris(config: PredictionConfig, tle: str, satellite: Optional[str],
              observer: Optional[Tuple[float, float, float]], start_time: Optional[str],
              duration: float, interval: float, output_format: str) -> None:
    """Sample a satellite at a fixed interval."""
    try:
        orbit = _load_orbit(tle, satellite)
        start_dt, end_dt = _window(start_time, duration)
        samples = Predictor(config).ephemeris(
            orbit, _observer(observer), start_dt, end_dt, timedelta(seconds=interval)
        )
    except (FileNotFoundError, ValueError) as e:
        _fail("Ephemeris", e)
        return

    rows = [s.to_dict() for s in samples]
    if output_format == 'json':
        click.echo(json.dumps(rows, indent=2))
        return

    fields: List[str] = ['time', 'latitude_deg', 'longitude_deg', 'altitude_km',
                         'footprint_km', 'sunlit']
    if observer:
        fields += ['azimuth_deg', 'elevation_deg', 'range_km', 'doppler_factor']
    writer = csv.DictWriter(sys.stdout, fieldnames=fields, extrasaction='ignore')
    writer.writeheader()
    writer.writerows(rows)


@main.command()
@tle_option
@satellite_option
@observer_option(required=True)
@start_option
@duration_option
@click.pass_obj
def windows(config: PredictionConfig, tle: str, satellite: Optional[str],
            observer: Tuple[float, float, float], start_time: Optional[str],
            duration: float) -> None:
    """List intervals during which a satellite is above the horizon."""
    try:
        orbit = _load_orbit(tle, satellite)
        start_dt, end_dt = _window(start_time, duration)
        result = Predictor(config).visibility_windows(orbit, _observer(observer), start_dt, end_dt)
    except (FileNotFoundError, ValueError) as e:
        _fail("Visibility windows", e)
        return

    click.echo(json.dumps([w.to_dict() for w in result], indent=2))


@main.command(name='sat-windows')
@tle_option
@click.option('--satellite', 'satellites', required=True, multiple=True,
              help='Satellite name, given twice')
@start_option
@duration_option
@click.option('--step', type=float, help='Nominal step in seconds (default: from config, 60)')
@click.pass_obj
def sat_windows(config: PredictionConfig, tle: str, satellites: Tuple[str, ...],
                start_time: Optional[str], duration: float, step: Optional[float]) -> None:
    """List mutual line-of-sight windows between two satellites."""
    if len(satellites) != 2:
        raise click.UsageError('Give --satellite exactly twice')
    try:
        orbit1 = SatelliteOrbit.from_tle_file(tle, satellites[0])
        orbit2 = SatelliteOrbit.from_tle_file(tle, satellites[1])
        start_dt, end_dt = _window(start_time, duration)
        result = Predictor(config).satellite_visibility_windows(
            orbit1, orbit2, start_dt, end_dt, step_seconds=step
        )
    except (FileNotFoundError, ValueError) as e:
        _fail("Satellite visibility", e)
        return

    click.echo(json.dumps([w.to_dict() for w in result], indent=2))


@main.command()
@tle_option
@satellite_option
def period(tle: str, satellite: Optional[str]) -> None:
    """Show a satellite's orbital period."""
    try:
        orbit = _load_orbit(tle, satellite)
    except (FileNotFoundError, ValueError) as e:
        _fail("Period", e)
        return

    seconds = Predictor.orbital_period_from_tle(orbit)
    click.echo(f"{orbit.satellite_name}: {seconds:.1f} s ({seconds / 60:.2f} min)")


if __name__ == '__main__':
    main()
