"""
Layout Projector - display-ready description of a manifest.

Simple actions become buttons; each parameter of a parameterized action
becomes a text input carrying the button that dispatches its owner.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional

from ..spec.models import Action, ActionManifest, ExecutionOutcome, ParameterizedAction, SimpleAction
from ..spec.normalize import NormalizedActions, normalize_actions

Dispatch = Callable[[Action, Optional[Mapping[str, Optional[str]]]], ExecutionOutcome]


@dataclass(frozen=True)
class ButtonDescriptor:
    label: str
    text: str
    action: Action
    on_click: Callable[..., ExecutionOutcome] = field(compare=False, repr=False)


@dataclass(frozen=True)
class InputDescriptor:
    name: str
    placeholder: str
    required: bool
    button: ButtonDescriptor
    type: str = "text"
    disabled: bool = False


@dataclass(frozen=True)
class LayoutProps:
    title: str
    description: str
    image: str
    website_url: str
    website_text: str
    buttons: tuple[ButtonDescriptor, ...]
    inputs: tuple[InputDescriptor, ...]
    style_preset: str = "default"
    type: str = "trusted"


def _simple_button(action: SimpleAction, dispatch: Dispatch) -> ButtonDescriptor:
    return ButtonDescriptor(
        label=action.label,
        text=action.label,
        action=action,
        on_click=lambda: dispatch(action, None),
    )


def _parameterized_button(action: ParameterizedAction, dispatch: Dispatch) -> ButtonDescriptor:
    def on_click(values: Optional[Mapping[str, Optional[str]]] = None) -> ExecutionOutcome:
        return dispatch(action, values or {})

    return ButtonDescriptor(label=action.label, text=action.label, action=action, on_click=on_click)


def project_layout(
    manifest: ActionManifest,
    origin: str,
    dispatch: Dispatch,
    actions: Optional[NormalizedActions] = None,
) -> LayoutProps:
    """
    Map a manifest onto buttons and inputs.

    Args:
        manifest: Validated manifest
        origin: Manifest origin, shown as the website link
        dispatch: Callable executing an action with parameter values
        actions: Pre-computed partitions (normalized here otherwise)
    """
    if actions is None:
        actions = normalize_actions(manifest)

    inputs: list[InputDescriptor] = []
    for action in actions.parameterized:
        button = _parameterized_button(action, dispatch)
        for param in action.parameters:
            inputs.append(
                InputDescriptor(
                    name=param.name,
                    placeholder=param.label,
                    required=param.required,
                    button=button,
                )
            )

    return LayoutProps(
        title=manifest.title,
        description=manifest.description.strip(),
        image=manifest.icon,
        website_url=origin,
        website_text=origin,
        buttons=tuple(_simple_button(action, dispatch) for action in actions.simple),
        inputs=tuple(inputs),
    )
