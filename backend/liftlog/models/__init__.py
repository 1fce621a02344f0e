from liftlog.models.exercise import Exercise
from liftlog.models.workout import Workout, UNTITLED_WORKOUT
from liftlog.models.workout_exercise import WorkoutExercise
from liftlog.models.workout_set import WorkoutSet

__all__ = ["Exercise", "Workout", "WorkoutExercise", "WorkoutSet", "UNTITLED_WORKOUT"]
