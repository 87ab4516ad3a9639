"""
Haptic feedback port used by the Pairs game engine.
"""

class HapticFeedback:
    """A device capability that can vibrate for a short time.

    Subclasses override vibrate(); callers check is_supported first and skip
    the call on platforms without a vibration motor.
    """
    is_supported = True

    def vibrate(self, duration_ms=20):
        raise NotImplementedError

class NoHapticFeedback(HapticFeedback):
    """Used where there is nothing to vibrate (Discord clients, desktop)."""
    is_supported = False

    def vibrate(self, duration_ms=20):
        pass

def get_haptic_feedback():
    """Returns the haptic feedback implementation for this platform."""
    return NoHapticFeedback()
