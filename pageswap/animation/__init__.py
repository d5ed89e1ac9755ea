from pageswap.animation.animator import Animator, StyleAnimator
from pageswap.animation.coordinator import AnimationCoordinator

__all__ = ["AnimationCoordinator", "Animator", "StyleAnimator"]
