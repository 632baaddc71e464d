"""
UI layout recommendations per reading strategy.
"""

from dataclasses import dataclass, field
from typing import Dict, Any

from .classifier import UserType


@dataclass(frozen=True)
class UIRecommendation:
    """Layout hint for the hosting editor UI."""
    layout: str
    description: str
    components: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'layout': self.layout,
            'description': self.description,
            'components': {name: dict(hints) for name, hints in self.components.items()},
        }


_RECOMMENDATIONS = {
    UserType.DIRECT: UIRecommendation(
        layout='focus',
        description='Simplify the interface and emphasize the code editor',
        components={
            'taskPanel': {'visible': True, 'collapsed': True},
            'outputPanel': {'visible': False},
        },
    ),
    UserType.REFERENTIAL: UIRecommendation(
        layout='balanced',
        description='Keep the three-column layout so reference material stays visible',
        components={
            'taskPanel': {'visible': True, 'collapsed': False},
            'outputPanel': {'visible': True, 'split': 'vertical'},
        },
    ),
    UserType.EXPLORATORY: UIRecommendation(
        layout='guided',
        description='Offer more guidance and documentation links',
        components={
            'taskPanel': {'visible': True, 'collapsed': False},
            'outputPanel': {'visible': True, 'split': 'horizontal'},
            'contextLinks': {'visible': True},
        },
    ),
}

_DEFAULT_RECOMMENDATION = UIRecommendation(
    layout='default',
    description='Keep the current UI layout',
)


def get_ui_recommendation(user_type) -> UIRecommendation:
    """Layout hint for a user type; unknown types keep the current layout."""
    try:
        user_type = UserType(user_type)
    except ValueError:
        return _DEFAULT_RECOMMENDATION
    return _RECOMMENDATIONS.get(user_type, _DEFAULT_RECOMMENDATION)
