# control/controller.py

import config


class SteeringController:
    """
    Turns the estimator's angle into a servo command.

    The angle range [steering_min, steering_max] is mapped linearly onto
    [-1, 1]; small commands inside the dead zone become 0 (straight).
    """

    def __init__(self, servo, steering_min: float, steering_max: float,
                 dead_zone: float = config.STEERING_DEAD_ZONE,
                 invert: bool = config.STEERING_INVERT):
        self.servo = servo
        self.steering_min = steering_min
        self.steering_max = steering_max
        self.dead_zone = dead_zone
        self.invert = invert
        self.last_command = 0.0

    def normalize(self, angle: float) -> float:
        angle = max(self.steering_min, min(self.steering_max, angle))

        if angle >= 0:
            value = angle / self.steering_max if self.steering_max else 0.0
        else:
            value = -angle / self.steering_min if self.steering_min else 0.0

        if abs(value) < self.dead_zone:
            return 0.0

        if self.invert:
            value = -value

        return value

    def update(self, angle: float) -> float:
        command = self.normalize(angle)
        self.last_command = command
        if self.servo is not None:
            self.servo.set_normalized(command)
        return command

    def center(self) -> None:
        self.last_command = 0.0
        if self.servo is not None:
            self.servo.set_center()

    def close(self) -> None:
        """Center the wheels and release the servo driver."""
        self.center()
        if self.servo is not None:
            self.servo.stop()
            self.servo = None
