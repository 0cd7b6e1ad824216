#!/usr/bin/env python3
"""
myCobot Pro - Main Entry Point
Command line access to the driver and the recorder
"""

import sys
import time
import argparse
import logging

from mycobot_pro import MovementRecorder, MyCobotController, MyCobotError, __version__
from mycobot_pro.config import Settings
from mycobot_pro.hardware import SimulatedArm, list_available_ports

logger = logging.getLogger("mycobot_pro")

def setup_logging(level: str = "INFO"):
    """Configure logging system"""
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.INFO

    # Console handler
    console_handler = logging.StreamHandler()
    console_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    console_handler.setFormatter(console_formatter)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.addHandler(console_handler)

    # Reduce noise from some modules
    logging.getLogger('serial').setLevel(logging.WARNING)

def list_ports_command(args, settings) -> int:
    """List available serial ports"""
    print("📋 Available Serial Ports:")
    print("-" * 50)

    ports = list_available_ports()

    if not ports:
        print("❌ No serial ports found!")
        print("\nPossible issues:")
        print("  - No USB devices connected")
        print("  - Missing USB drivers (CH9102/CP210x)")
        print("  - Permission issues")
        return 1

    for port in ports:
        print(f"\n📍 {port['device']}")
        print(f"   Description: {port['description']}")
        print(f"   Hardware ID: {port['hwid']}")
        if port['is_usb']:
            print("   ✅ USB Device")
    return 0

def info_command(args, settings) -> int:
    """Print version, power state and current position"""
    with _make_controller(args, settings) as robot:
        print(f"Firmware version: {robot.get_system_version()}")
        print(f"Power: {'ON' if robot.is_power_on() else 'OFF'}")
        angles = robot.get_angles()
        print("Joint angles: " + ", ".join(f"{a:.2f}°" for a in angles))
        coords = robot.get_coords()
        print(f"Position: X={coords[0]:.1f}mm Y={coords[1]:.1f}mm Z={coords[2]:.1f}mm")
        print(f"Rotation: Rx={coords[3]:.1f}° Ry={coords[4]:.1f}° Rz={coords[5]:.1f}°")
    return 0

def record_command(args, settings) -> int:
    """Record a hand-guided movement for a fixed time"""
    with _make_controller(args, settings) as robot:
        recorder = MovementRecorder(robot, sample_rate=args.rate, mode=args.mode)
        recorder.start_recording()
        print(f"🔴 Recording for {args.duration:.1f}s - move the arm by hand (Ctrl+C to stop early)")
        try:
            time.sleep(args.duration)
        except KeyboardInterrupt:
            print()
        summary = recorder.stop_recording()
        path = recorder.save_recording(args.output, description=args.description)
        print(f"✅ {summary.frame_count} frames, {summary.duration_ms / 1000:.2f}s "
              f"({summary.average_frame_rate:.1f} fps) saved to {path}")
    return 0

def play_command(args, settings) -> int:
    """Replay a recording file"""
    with _make_controller(args, settings) as robot:
        recorder = MovementRecorder(robot)
        try:
            result = recorder.play_recording(args.file, speed=args.speed,
                                             move_speed=args.move_speed, loop=args.loop)
        except KeyboardInterrupt:
            print("\n⏹  Playback interrupted")
            return 130
        print(f"✅ {result.passes} pass(es), {result.frames_sent} frames sent, "
              f"{result.frame_errors} errors")
    return 0

def list_command(args, settings) -> int:
    """List recordings in a directory"""
    from mycobot_pro.control import RecordingStore

    recordings = RecordingStore(args.directory).list()
    if not recordings:
        print("📋 No recordings found")
        return 0

    print(f"📋 {len(recordings)} recordings:")
    print("-" * 60)
    for info in recordings:
        meta = info.metadata
        print(f"{info.filename:30s} | {meta.mode.value:6s} | {info.frame_count:5d} frames | "
              f"{meta.duration_ms / 1000:6.2f}s | {meta.recorded_at}")
    return 0

def _make_controller(args, settings) -> MyCobotController:
    transport = SimulatedArm() if args.simulate else None
    if args.simulate:
        settings.settle_time = 0.0
    return MyCobotController(port=args.port, baudrate=args.baudrate,
                             transport=transport, settings=settings)

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='mycobot',
        description=f'myCobot Pro v{__version__} - Serial driver and movement recorder',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mycobot ports                          # Show available ports
  mycobot --port /dev/ttyUSB0 info       # Version, power and position
  mycobot record wave.json --duration 10 # Teach a movement by hand
  mycobot play wave.json --speed 0.5     # Replay at half speed
  mycobot --simulate info                # No hardware needed
        """
    )

    parser.add_argument('--version', action='version', version=f'myCobot Pro v{__version__}')
    parser.add_argument('--port', '-p', default=None,
                        help='Serial port (auto-detect if not specified)')
    parser.add_argument('--baudrate', '-b', type=int, default=None,
                        help='Baud rate (default: 115200)')
    parser.add_argument('--simulate', action='store_true',
                        help='Use the simulated arm instead of a serial port')
    parser.add_argument('--settings', default=None,
                        help='Settings YAML file (default: ~/.mycobot_pro/settings.yaml)')
    parser.add_argument('--debug', '-d', action='store_true',
                        help='Enable debug logging')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        default=None, help='Set logging level (default: from settings)')

    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('ports', help='List available serial ports')
    p.set_defaults(func=list_ports_command)

    p = sub.add_parser('info', help='Show version, power state and position')
    p.set_defaults(func=info_command)

    p = sub.add_parser('record', help='Record a hand-guided movement')
    p.add_argument('output', help='Recording file to write')
    p.add_argument('--duration', type=float, default=10.0, help='Seconds to record')
    p.add_argument('--rate', type=float, default=None, help='Sample rate in Hz')
    p.add_argument('--mode', choices=['angles', 'coords'], default=None)
    p.add_argument('--description', default='', help='Stored in the metadata')
    p.set_defaults(func=record_command)

    p = sub.add_parser('play', help='Replay a recording')
    p.add_argument('file', help='Recording file')
    p.add_argument('--speed', type=float, default=None, help='Time scale (2.0 = twice as fast)')
    p.add_argument('--move-speed', type=int, default=None, help='Servo speed 0-100')
    p.add_argument('--loop', action='store_true', default=None, help='Repeat until Ctrl+C')
    p.set_defaults(func=play_command)

    p = sub.add_parser('list', help='List recordings in a directory')
    p.add_argument('directory', nargs='?', default=None)
    p.set_defaults(func=list_command)

    return parser

def main(argv=None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    settings = Settings.load(args.settings)

    # Fill unset options from settings
    if getattr(args, 'rate', None) is None and hasattr(args, 'rate'):
        args.rate = settings.sample_rate
    if getattr(args, 'mode', None) is None and hasattr(args, 'mode'):
        args.mode = settings.recording_mode
    if getattr(args, 'speed', None) is None and hasattr(args, 'speed'):
        args.speed = settings.playback_speed
    if getattr(args, 'move_speed', None) is None and hasattr(args, 'move_speed'):
        args.move_speed = settings.move_speed
    if getattr(args, 'loop', None) is None and hasattr(args, 'loop'):
        args.loop = settings.loop_playback
    if getattr(args, 'directory', None) is None and hasattr(args, 'directory'):
        args.directory = settings.recordings_dir

    # Setup logging
    level = 'DEBUG' if args.debug else (args.log_level or settings.log_level)
    setup_logging(level)

    try:
        return args.func(args, settings)
    except KeyboardInterrupt:
        print("\n\n👋 Interrupted by user")
        return 0
    except MyCobotError as e:
        logger.error(f"❌ {e}")
        if args.debug:
            import traceback
            traceback.print_exc()
        return 1

if __name__ == "__main__":
    sys.exit(main())
