# hardware/servo.py
import board
import busio
from adafruit_pca9685 import PCA9685

PWM_PERIOD_US = 20000  # 50 Hz


class Servo:
    """Steering servo on a PCA9685 channel, driven by a normalized command."""

    def __init__(
        self,
        channel=0,
        center_us=1600,
        left_us=950,
        right_us=2200,
        frequency=50,
    ):
        i2c = busio.I2C(board.SCL, board.SDA)
        self.pca = PCA9685(i2c)
        self.pca.frequency = frequency
        self.channel = self.pca.channels[channel]

        self.center_us = center_us
        self.left_us = left_us
        self.right_us = right_us
        self.last_us = center_us

        self.set_center()

    def _set_us(self, us):
        self.last_us = us
        self.channel.duty_cycle = int(us * 65535 / PWM_PERIOD_US)

    def set_center(self):
        self._set_us(self.center_us)

    def pulse_for(self, value: float) -> int:
        """
        value in [-1.0 (left) ... 1.0 (right)] -> pulse width in microseconds
        """
        value = max(-1.0, min(1.0, value))
        if value < 0:
            return int(self.center_us + value * (self.center_us - self.left_us))
        return int(self.center_us + value * (self.right_us - self.center_us))

    def set_normalized(self, value: float):
        self._set_us(self.pulse_for(value))

    def stop(self):
        self.channel.duty_cycle = 0
        self.pca.deinit()
