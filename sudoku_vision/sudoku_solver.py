"""
Sudoku Solver - Main Application Module
"""

import cv2
import numpy as np
import argparse
import os
import sys

from .cells import check_image_size, extract_cells
from .grid import EMPTY, Grid, find_conflicts, format_board
from .ocr import TesseractRecognizer
from .preprocessing import MAX_IMAGE_SIZE, load_image, normalize_cell, resize_to_fit, show_samples
from .refine import refine_grid
from .sampling import DEFAULT_SAMPLES, build_presets, read_grid_digits
from .solver import solve_puzzle


class SudokuSolver:
    """
    Main class for the Sudoku Solver application.

    This class runs the whole pipeline for one photo of a puzzle: cell
    extraction, repeated-sample recognition, constraint refinement and
    solving.
    """

    def __init__(self, samples=DEFAULT_SAMPLES, max_size=MAX_IMAGE_SIZE, refine=True,
                 save_intermediate=True, recognizer=None, tesseract_cmd=None):
        """
        Initialize the Sudoku Solver.

        Args:
            samples (int): Recognition passes per cell, each with its own threshold preset
            max_size (int): Longer image side after resizing (default: 800)
            refine (bool): Fill cells forced by the recognized digits before solving
            save_intermediate (bool): Whether to save intermediate processing steps
            recognizer (DigitRecognizer): Recognizer to use instead of Tesseract
            tesseract_cmd (str): Path to the tesseract executable if not on PATH
        """
        self.presets = build_presets(samples)
        self.max_size = max_size
        self.refine = refine
        self.save_intermediate = save_intermediate
        self.recognizer = recognizer
        self.tesseract_cmd = tesseract_cmd
        self.intermediate_images = {}

    def _open_recognizer(self):
        if self.recognizer is not None:
            return self.recognizer
        return TesseractRecognizer(tesseract_cmd=self.tesseract_cmd)

    def recognize_image(self, image):
        """
        Turn an RGB puzzle image into a grid of recognized digits.

        Args:
            image (np.ndarray): RGB or RGBA image cropped to the puzzle

        Returns:
            dict: grid (Grid with OriginalMask), recognized (board before
            refinement), scores, votes, refine_notes, conflicts, image
        """
        resized = resize_to_fit(image, self.max_size)
        h, w = resized.shape[:2]
        ok, reason = check_image_size(w, h)
        if not ok:
            raise ValueError(reason)

        cells = extract_cells(resized)

        with self._open_recognizer() as recognizer:
            recognized, scores, votes = read_grid_digits(cells, recognizer, presets=self.presets)

        original = recognized != EMPTY
        board = recognized
        refine_notes = []
        if self.refine:
            board, refine_notes = refine_grid(recognized)

        return {
            'grid': Grid(board, original),
            'recognized': recognized,
            'scores': scores,
            'votes': votes,
            'refine_notes': refine_notes,
            'conflicts': find_conflicts(board),
            'image': resized,
        }

    def process_image(self, image_path, output_dir='output', show_cell=None):
        """
        Process a Sudoku image through the complete pipeline.

        Pipeline steps:
        1. Load and resize image
        2. Extract the 81 cells
        3. Read digits by majority vote over repeated samples
        4. Refine forced cells
        5. Solve and render the solution

        Args:
            image_path (str): Path to the input image
            output_dir (str): Directory to save output images
            show_cell (tuple): (row, col), 0-based, of a cell whose sample views
                are displayed with matplotlib

        Returns:
            dict: Results containing the grid, solution and status message,
            or None if the image cannot be used
        """
        print(f"\n{'='*60}")
        print(f"Processing: {os.path.basename(image_path)}")
        print(f"{'='*60}")

        self.intermediate_images = {}

        print("\n[1/5] Loading image...")
        original = load_image(image_path)
        print(f"      Image size: {original.shape[1]}x{original.shape[0]}")

        resized = resize_to_fit(original, self.max_size)
        h, w = resized.shape[:2]
        ok, reason = check_image_size(w, h)
        if not ok:
            print(f"      ✗ {reason}")
            return None
        print(f"      Resized to: {w}x{h}")

        print("\n[2/5] Extracting cells and reading digits...")
        print(f"      {len(self.presets)} samples per cell:")
        for preset in self.presets:
            print(f"        - block size 1/{preset.block_divisor}, bias {preset.bias}")

        result = self.recognize_image(resized)
        grid = result['grid']
        recognized = result['recognized']

        given_count = int(np.count_nonzero(recognized))
        unsure = int(np.count_nonzero(result['scores'] < 1.0))
        print(f"      ✓ Recognized {given_count} digits ({unsure} cells with split votes)")
        print(format_board(recognized))
        if given_count < 17:
            print(f"      WARNING: Low number of detected givens ({given_count}); OCR may be unreliable")

        print("\n[3/5] Refining forced cells...")
        if not self.refine:
            print("      Skipped")
        elif result['refine_notes']:
            for note in result['refine_notes']:
                print(f"        - {note}")
        else:
            print("      No forced cells")

        if result['conflicts']:
            print("      Note: the recognized digits break Sudoku rules:")
            for note in result['conflicts']:
                print(f"        - {note}")

        if show_cell is not None:
            r, c = show_cell
            cell = extract_cells(resized)[(r, c)]
            print(f"      Showing samples for cell ({r+1},{c+1}): votes {result['votes'][(r, c)]}")
            show_samples(cell, self.presets, title=f"Cell ({r+1},{c+1})")

        print("\n[4/5] Solving...")
        solution, solve_msg = solve_puzzle(grid.cells)
        if solution is None:
            print(f"      ✗ Could not solve: {solve_msg}")
            print("        (Check OCR accuracy or image quality)")
        else:
            print(f"      ✓ Solved puzzle ({solve_msg}):")
            print(format_board(solution))

        print("\n[5/5] Rendering results...")
        if self.save_intermediate:
            preset = self.presets[0]
            self.intermediate_images['normalized'] = normalize_cell(
                resized, preset.block_divisor, preset.bias)
            if solution is not None:
                self.intermediate_images['solved_overlay'] = render_solution_on_image(
                    resized, solution, grid.original)
            self._save_results(image_path, output_dir)

        print(f"\n{'='*60}")
        print("Processing complete!")
        if self.save_intermediate:
            print(f"Results saved to: {output_dir}/")
        print(f"{'='*60}\n")

        return {
            'grid': grid,
            'recognized': recognized,
            'scores': result['scores'],
            'solution': solution,
            'message': solve_msg,
        }

    def _save_results(self, image_path, output_dir):
        """
        Save intermediate processing results to disk.

        Args:
            image_path (str): Original image path (for naming)
            output_dir (str): Output directory
        """
        os.makedirs(output_dir, exist_ok=True)
        base_name = os.path.splitext(os.path.basename(image_path))[0]

        for name, image in self.intermediate_images.items():
            output_path = os.path.join(output_dir, f"{base_name}_{name}.jpg")
            if image.ndim == 3:
                code = cv2.COLOR_RGBA2BGR if image.shape[2] == 4 else cv2.COLOR_RGB2BGR
                image = cv2.cvtColor(image, code)
            cv2.imwrite(output_path, image)

        print(f"      Saved {len(self.intermediate_images)} intermediate images")


def render_solution_on_image(image: np.ndarray, solved: np.ndarray, original: np.ndarray) -> np.ndarray:
    """
    Overlay solved digits on top of the puzzle image.

    Given cells (original mask set) already show their digit and are left
    alone; solved digits are drawn in green.
    """
    if image.ndim == 2:
        canvas = cv2.cvtColor(image, cv2.COLOR_GRAY2RGB)
    else:
        canvas = np.ascontiguousarray(image[:, :, :3]).copy()

    h, w = canvas.shape[:2]
    cell_h = h // 9
    cell_w = w // 9
    font = cv2.FONT_HERSHEY_SIMPLEX
    scale = max(0.4, min(cell_w, cell_h) / 50)
    thickness = max(1, int(round(scale * 2)))

    for r in range(9):
        for c in range(9):
            val = int(solved[r, c])
            if val == EMPTY or original[r, c]:
                continue
            text = str(val)
            size, _ = cv2.getTextSize(text, font, scale, thickness)
            x = c * cell_w + (cell_w - size[0]) // 2
            y = r * cell_h + (cell_h + size[1]) // 2
            cv2.putText(canvas, text, (x, y), font, scale, (0, 160, 0), thickness, cv2.LINE_AA)

    return canvas


def main():
    """
    Main entry point for the Sudoku Solver application.

    Handles command-line arguments and processes images.
    """
    parser = argparse.ArgumentParser(
        description='Sudoku Solver - read a photographed puzzle and solve it',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  Process a single image:
    python -m sudoku_vision --image 01.jpg

  Use five samples per cell:
    python -m sudoku_vision --image 01.jpg --samples 5

  Tesseract not on PATH:
    python -m sudoku_vision --image 01.jpg --tesseract-cmd /opt/tesseract/bin/tesseract
        """
    )

    parser.add_argument('--image', '-i', required=True,
                        help='Path to input Sudoku image')
    parser.add_argument('--output', '-o', default='output',
                        help='Output directory (default: output)')
    parser.add_argument('--samples', '-n', type=int, default=DEFAULT_SAMPLES,
                        help=f'Recognition passes per cell (default: {DEFAULT_SAMPLES})')
    parser.add_argument('--max-size', type=int, default=MAX_IMAGE_SIZE,
                        help=f'Longer image side after resizing (default: {MAX_IMAGE_SIZE})')
    parser.add_argument('--no-refine', action='store_true',
                        help='Do not fill forced cells before solving')
    parser.add_argument('--no-save', action='store_true',
                        help='Do not save intermediate images')
    parser.add_argument('--tesseract-cmd', default=None,
                        help='Path to the tesseract executable')
    parser.add_argument('--show-cell', type=int, nargs=2, metavar=('ROW', 'COL'), default=None,
                        help='Display the normalized sample views of one cell (1-based)')

    args = parser.parse_args()

    # Check if image exists
    if not os.path.exists(args.image):
        print(f"Error: Image file not found: {args.image}")
        sys.exit(1)

    try:
        solver = SudokuSolver(
            samples=args.samples,
            max_size=args.max_size,
            refine=not args.no_refine,
            save_intermediate=not args.no_save,
            tesseract_cmd=args.tesseract_cmd,
        )
        show_cell = None
        if args.show_cell:
            row, col = args.show_cell
            if not (1 <= row <= 9 and 1 <= col <= 9):
                raise ValueError(f"--show-cell expects values 1-9, got {row} {col}")
            show_cell = (row - 1, col - 1)
        result = solver.process_image(args.image, args.output, show_cell=show_cell)

        if result is None:
            print("\nProcessing failed. Please check the image and try again.")
            sys.exit(1)

    except Exception as e:
        print(f"\nError during processing: {str(e)}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == '__main__':
    main()
