# --- Imports ---

import cv2
import numpy as np

# --- Presets of the amount effects and severity ---

PRESETS = {
    "none": {
        "severity": 0.0,
        "light_level": 1.0,
        "effects": []
    },
    "light": {
        "severity": 0.2,
        "light_level": 1.0,
        "effects": ["noise", "jitter_color", "white_balance_shift"]
    },
    "medium": {
        "severity": 0.5,
        "light_level": 1.0,
        "effects": ["noise", "jitter_color", "white_balance_shift", "blur"]
    },
    "webcam_realistic": {
        "severity": 0.5,
        "light_level": 0.8,
        "effects": ["noise", "jitter_color", "white_balance_shift", "blur", "temporal_instability"]
    }
}

# Lower number = applied first
EFFECT_PRIORITY = {
    "noise": 0,                 # Sensor/ISO noise happens first
    "jitter_color": 1,          # Brightness/contrast/tint readout adjustments
    "white_balance_shift": 2,   # Color drift after initial readout
    "blur": 3,                  # Lens defocus
    "temporal_instability": 4,  # Frame-level drops/duplicates happen last
}

# --- Frame distorter ---

class FrameDistorter:

    """
    Applies webcam-like distortions to clean sender frames so the receiver can be tried without a camera.

    """

    def __init__(self, preset = "webcam_realistic", seed = None):

        if preset not in PRESETS:
            raise ValueError(f"Unknown distortion preset '{preset}', expected one of {sorted(PRESETS)}")

        config = PRESETS[preset]

        self.preset = preset
        self.severity = config["severity"]
        self.light_level = config["light_level"]
        self.effects_obj = Effects(self.light_level, seed)
        self.effects = []

        config_effects = sorted(config["effects"], key = lambda effect_name: EFFECT_PRIORITY.get(effect_name, 99))

        for name in config_effects: # Map effect names to methods
            self.effects.append(getattr(self.effects_obj, name))

        if self.effects:
            print(f"[INFO] Frame distorter effects applied in order: {[effect.__name__ for effect in self.effects]}")

    def apply(self, frame):

        """
        Returns a distorted copy of the frame. The "none" preset returns the frame unchanged.

        """

        if not self.effects and self.light_level == 1.0:
            return frame

        frame = np.clip(frame.astype(np.float32) * self.light_level, 0, 255).astype(np.uint8) # Global brightness

        for effect in self.effects:
            frame = effect(frame, self.severity)

        return frame

# --- Effects ---

class Effects:

    def __init__(self, light_level, seed = None):

        self.light_level = light_level
        self.rng = np.random.default_rng(seed)

        # White balance gains (continuous drift)
        self.wb_r = 1.0
        self.wb_g = 1.0
        self.wb_b = 1.0

        self.last_frame = None
        self.frozen_frame = None
        self.freeze_timer = 0

    # --- Sensor noise ---

    def noise(self, frame, severity):
        # Darker scenes get more noise
        sigma = 25.0 * severity / max(self.light_level, 0.1)
        noisy = frame.astype(np.float32) + self.rng.normal(0.0, sigma, frame.shape)
        return np.clip(noisy, 0, 255).astype(np.uint8)

    # --- Color jitter (brightness/contrast/tint) ---

    def jitter_color(self, frame, severity):
        max_brightness = 40 * severity / max(self.light_level, 0.1)
        brightness = self.rng.uniform(-max_brightness, max_brightness)

        contrast = self.rng.uniform(1 - 0.4 * severity, 1 + 0.4 * severity)

        max_tint = 0.08 * severity
        gains = 1 + self.rng.uniform(-max_tint, max_tint, 3) # B, G, R

        jittered = (frame.astype(np.float32) - 128.0) * contrast + 128.0 + brightness
        jittered *= gains
        return np.clip(jittered, 0, 255).astype(np.uint8)

    # --- White balance shift (real webcam drift) ---

    def white_balance_shift(self, frame, severity):
        # Drift is stronger when light is low
        stability = 1.2 - self.light_level
        strength = severity * stability * 0.02

        self.wb_r = min(1.3, max(0.7, self.wb_r + self.rng.uniform(-strength, strength)))
        self.wb_g = min(1.3, max(0.7, self.wb_g + self.rng.uniform(-strength, strength)))
        self.wb_b = min(1.3, max(0.7, self.wb_b + self.rng.uniform(-strength, strength)))

        gains = np.array([self.wb_b, self.wb_g, self.wb_r], dtype = np.float32)
        return np.clip(frame.astype(np.float32) * gains, 0, 255).astype(np.uint8)

    # --- Soft-Focus Blur (Gaussian Blur) ---

    def blur(self, frame, severity):
        sigma = 0.5 + severity * 2.0 # ~0.5-2.5 pixels
        return cv2.GaussianBlur(frame, (0, 0), sigma)

    # --- Frame-Rate Instability ---

    def temporal_instability(self, frame, severity, drop_prob = 0.05, freeze_prob = 0.03, freeze_duration = 3):
        """
        Returns exactly one frame every call, simulating dropped updates and short freezes.
        """

        if self.last_frame is None:
            self.last_frame = frame.copy()
            return frame

        if self.freeze_timer > 0:
            self.freeze_timer -= 1
            return self.frozen_frame

        r = self.rng.random()

        if r < freeze_prob * severity:
            self.freeze_timer = freeze_duration
            self.frozen_frame = self.last_frame.copy()
            return self.frozen_frame

        if r < (freeze_prob + drop_prob) * severity: # Frame repeats
            return self.last_frame

        self.last_frame = frame.copy()
        return frame
