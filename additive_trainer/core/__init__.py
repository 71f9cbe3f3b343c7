from .types import Example, FeatureKey, FeatureVector, FlatFeature, make_feature_vector
from .functions import FeatureFunction, FunctionForm, Linear, Spline
from .model import AdditiveModel
from .flatten import flatten_with_dropout

__all__ = [
    "Example", "FeatureKey", "FeatureVector", "FlatFeature", "make_feature_vector",
    "FeatureFunction", "FunctionForm", "Linear", "Spline",
    "AdditiveModel",
    "flatten_with_dropout",
]
