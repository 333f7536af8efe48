from .trainer import MIN_SAMPLES, LabeledSample, ModelTrainer

__all__ = ["LabeledSample", "MIN_SAMPLES", "ModelTrainer"]
