import logging
import mediapipe as mp
import numpy as np
from typing import List, Optional, Tuple

from _landmark_utils import reduce_to_68_landmarks



def get_face_landmarks(
    image : np.ndarray,
    min_detection_confidence : float = 0.5) -> Optional[List[Tuple[float, float]]]:
    """
    Accepts an RGB image and returns the 68 landmarks of the face in it,
    in pixel coordinates of the image.

    Parameters
    ----------
    image : np.ndarray
        An RGB image containing a face.
    min_detection_confidence : float
        The minimum confidence to detect a face.

    Returns
    -------
    List[Tuple[float, float]]
        The 68 landmark locations (x, y).
    None
        If no face was detected.
    """
    height, width = image.shape[:2]

    with mp.solutions.face_mesh.FaceMesh(  # type: ignore
        static_image_mode=True,
        max_num_faces=1,
        refine_landmarks=False,
        min_detection_confidence=min_detection_confidence) as face_mesh:

        results = face_mesh.process(np.ascontiguousarray(image))

    if not results or not results.multi_face_landmarks:
        logging.info("No face landmarks detected")
        return None

    # NOTE: only the first face is used.
    face_landmarks = results.multi_face_landmarks[0]
    mesh_landmarks = [(landmark.x * width, landmark.y * height)
                      for landmark in face_landmarks.landmark]

    return reduce_to_68_landmarks(mesh_landmarks)
