import argparse
import logging
import os
import sys
import time
from datetime import date
from zoneinfo import ZoneInfoNotFoundError

import PIL.Image

from sunpath_renders import constants
from sunpath_renders.animation import animate
from sunpath_renders.cities import city_names, find_city
from sunpath_renders.core import Renderer, RenderRequest
from sunpath_renders.projection import Viewport


def parse_time(value):
    """'HH:MM' or a decimal hour such as '13.5'."""
    try:
        if ":" in value:
            hours, minutes = value.split(":", 1)
            hour = int(hours) + int(minutes) / 60.0
        else:
            hour = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid time {value!r}, expected HH:MM or a decimal hour")
    if not 0.0 <= hour <= 24.0:
        raise argparse.ArgumentTypeError(f"time must be within 00:00-24:00, got {value!r}")
    return hour


def parse_date(value):
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD")


def build_parser():
    parser = argparse.ArgumentParser(description="Sun Path Renderer CLI")

    location = parser.add_argument_group("location")
    location.add_argument("--city", help=f"Named location ({', '.join(city_names())})")
    location.add_argument("--lat", type=float, help="Latitude in degrees")
    location.add_argument("--lon", type=float, help="Longitude in degrees")
    location.add_argument("--tz", default="UTC", help="IANA time zone for --lat/--lon")

    when = parser.add_argument_group("time")
    when.add_argument("--date", type=parse_date, default=None, help="Local date YYYY-MM-DD (default: today)")
    when.add_argument("--time", type=parse_time, default=12.0, help="Local time HH:MM or decimal hour")

    view = parser.add_argument_group("view")
    view.add_argument("--width", type=int, default=constants.DEFAULT_WIDTH)
    view.add_argument("--height", type=int, default=constants.DEFAULT_HEIGHT)
    view.add_argument("--azimuth", type=float, default=constants.DEFAULT_CENTER_AZIMUTH,
                      help="Camera azimuth in degrees (N=0, E=90, S=180, W=270)")
    view.add_argument("--pitch", type=float, default=constants.DEFAULT_CENTER_ALTITUDE,
                      help="Camera pitch in degrees")
    view.add_argument("--fov", type=float, default=constants.DEFAULT_FOV,
                      help=f"Horizontal field of view ({constants.FOV_MIN:g}-{constants.FOV_MAX:g})")
    view.add_argument("--follow-sun", action="store_true", help="Point the camera at the sun's azimuth")
    view.add_argument("--auto-camera", action=argparse.BooleanOptionalAction, default=True,
                      help="Derive pitch and fov from the solar altitude")
    view.add_argument("--sun-path", action="store_true", help="Draw the day's sun path and sunrise/sunset")
    view.add_argument("--altitude-scale", action="store_true", help="Draw altitude reference lines")

    parser.add_argument("--output", default=None, help="Output image (default: sunpath.png, sunpath.gif)")
    parser.add_argument("--info", action="store_true", help="Print sun data instead of rendering")
    parser.add_argument("--animate", type=float, default=None, metavar="STEP",
                        help="Write an animated GIF over the day, STEP hours per frame")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def resolve_location(parser, args):
    """(label, latitude, longitude, timezone) from --city or --lat/--lon/--tz."""
    if args.city:
        try:
            city = find_city(args.city)
        except KeyError as e:
            parser.error(str(e))
        return city.name, city.latitude, city.longitude, city.timezone
    if args.lat is None or args.lon is None:
        parser.error("either --city or both --lat and --lon are required")
    return f"{args.lat:.4f}, {args.lon:.4f}", args.lat, args.lon, args.tz


def print_info(label, frame, timezones):
    sun = frame.sun
    hours = int(sun.hour)
    minutes = int(round((sun.hour - hours) * 60))
    print(f"Location:    {label} ({sun.latitude:.4f}, {sun.longitude:.4f}) {sun.timezone}")
    print(f"Date:        {sun.date.isoformat()} {hours:02d}:{minutes:02d}")
    print(f"Altitude:    {sun.altitude:.2f} deg")
    print(f"Azimuth:     {sun.azimuth:.2f} deg")
    print(f"Sunrise:     {timezones.format_time(sun.sunrise, sun.timezone)}")
    print(f"Sunset:      {timezones.format_time(sun.sunset, sun.timezone)}")
    print(f"Solar noon:  {timezones.format_time(sun.solar_noon, sun.timezone)}")
    print(f"Day length:  {sun.day_length_hours:.2f} h")
    print(f"Condition:   {sun.polar_condition.value}")
    print(f"Sky phase:   {frame.sky_phase.value}")
    print(f"On screen:   {'yes' if frame.sun_visible else 'no'}")


def save_gif(frames, path, duration_ms=100):
    images = [PIL.Image.fromarray(frame.image) for frame in frames]
    images[0].save(path, save_all=True, append_images=images[1:], duration=duration_ms, loop=0)


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format="%(asctime)s %(name)s %(levelname)s: %(message)s")

    label, latitude, longitude, tz_name = resolve_location(parser, args)

    try:
        request = RenderRequest(
            date=args.date or date.today(),
            hour=args.time,
            latitude=latitude,
            longitude=longitude,
            timezone=tz_name,
            viewport=Viewport(args.azimuth, args.pitch, args.fov),
            width=args.width,
            height=args.height,
            show_sun_path=args.sun_path,
            show_altitude_scale=args.altitude_scale,
            auto_camera=args.auto_camera,
            follow_sun=args.follow_sun,
        )
    except ValueError as e:
        parser.error(str(e))

    renderer = Renderer(cache_size=0 if args.animate else 32)

    try:
        if args.info:
            print_info(label, renderer.render(request), renderer.timezones)
        elif args.animate:
            output = args.output or "sunpath.gif"
            print(f"Rendering {label} every {args.animate:g}h...")
            t0 = time.time()
            frames = list(animate(renderer, request, step=args.animate))
            save_gif(frames, output)
            print(f"  {len(frames)} frames in {time.time() - t0:.2f}s -> {os.path.abspath(output)}")
        else:
            output = args.output or "sunpath.png"
            t0 = time.time()
            frame = renderer.render(request)
            PIL.Image.fromarray(frame.image).save(output)
            print(f"Rendered {label} in {time.time() - t0:.2f}s -> {os.path.abspath(output)}")
    except ZoneInfoNotFoundError:
        parser.error(f"unknown time zone {tz_name!r}")
    except ValueError as e:
        parser.error(str(e))


def run_info():
    """Entry point for sunpath-info command."""
    sys.argv = [sys.argv[0], "--info"] + sys.argv[1:]
    main()


if __name__ == "__main__":
    main()
