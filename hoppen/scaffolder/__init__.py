"""Hoppen scaffolder -- materializes a static web project from feature flags.

Quick usage::

    from hoppen.config import Config
    from hoppen.scaffolder import ProjectGenerator, ProjectIdentity, resolve_features

    generator = ProjectGenerator(Config())
    flags = resolve_features(["shaders", "gsap"], ["ScrollTrigger"])
    result = await generator.generate(ProjectIdentity.from_name("My Sketch"), flags)
"""

from hoppen.scaffolder.features import Feature, FeatureFlags, resolve_features
from hoppen.scaffolder.generator import (
    FileStatus,
    GenerationResult,
    ProjectGenerator,
    ProjectIdentity,
    WritePolicy,
)
from hoppen.scaffolder.templates import TemplateRenderer

__all__ = [
    "Feature",
    "FeatureFlags",
    "FileStatus",
    "GenerationResult",
    "ProjectGenerator",
    "ProjectIdentity",
    "TemplateRenderer",
    "WritePolicy",
    "resolve_features",
]
