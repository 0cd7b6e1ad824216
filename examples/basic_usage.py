#!/usr/bin/env python3
"""
Basic usage example for myCobot Pro
Shows how to use the library programmatically

Pass --simulate to run against the built-in simulated arm.
"""

import sys
import time

from mycobot_pro import MyCobotController, MovementRecorder, MyCobotError
from mycobot_pro.config import Settings
from mycobot_pro.hardware import SimulatedArm, get_default_port

def main():
    simulate = "--simulate" in sys.argv

    if simulate:
        arm = SimulatedArm()
        controller = MyCobotController(transport=arm, settings=Settings(settle_time=0.0))
    else:
        port = get_default_port()
        print(f"Using port: {port}")
        controller = MyCobotController(port)

    # Connect
    try:
        controller.connect()
    except MyCobotError as e:
        print(f"Failed to connect: {e}")
        return

    print("Connected successfully!")

    try:
        # 1. Firmware and power
        print(f"\n1. Firmware version: {controller.get_system_version()}")
        controller.power_on()

        # 2. Current position
        print("\n2. Current position:")
        for joint, angle in enumerate(controller.get_angles(), start=1):
            print(f"   J{joint}: {angle:.1f}°")

        # 3. Move joints
        print("\n3. Moving base 45°...")
        controller.send_angle(1, 45.0, 50)
        time.sleep(1)

        print("   Moving all joints...")
        controller.send_angles([0, -30, 60, 0, 45, 0], 50)
        time.sleep(1)

        # 4. Gripper
        print("\n4. Opening gripper...")
        controller.set_gripper_value(80, 50)
        time.sleep(1)
        print("   Closing gripper...")
        controller.set_gripper_state(1, 50)
        time.sleep(1)

        # 5. Teach a short movement
        print("\n5. Recording for 2 seconds - move the arm by hand")
        recorder = MovementRecorder(controller, sample_rate=20)
        recorder.start_recording()
        if simulate:
            for step in range(10):
                arm.move_by_hand([step * 5.0, 0, 0, 0, 0, 0])
                time.sleep(0.2)
        else:
            time.sleep(2)
        summary = recorder.stop_recording()
        print(f"   Captured {summary.frame_count} frames ({summary.duration_ms:.0f}ms)")

        # 6. Replay it twice as fast
        print("\n6. Replaying at 2x...")
        result = recorder.play_recording(
            recorder.sampler.to_recording(), speed=2.0
        )
        print(f"   Sent {result.frames_sent} frames")

    except KeyboardInterrupt:
        print("\nInterrupted!")
        controller.stop()
    finally:
        # Safe shutdown
        controller.disconnect()
        print("\nDisconnected")

if __name__ == "__main__":
    main()
