"""OnboardBot: personalised onboarding guides from repository and team context."""

__version__ = "1.0.0"

APP_NAME = "OnboardBot"
APP_TAGLINE = "AI-Powered New Hire Onboarding Accelerator"

__all__ = ["APP_NAME", "APP_TAGLINE", "__version__"]
