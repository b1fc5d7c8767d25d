from typing import Dict, Iterable

from PySide6.QtCore import Signal
from PySide6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QTreeWidget, QTreeWidgetItem,
    QHeaderView, QLabel, QPushButton, QFileDialog, QMessageBox
)

from .xlink_document import (
    ParamValue, XLinkAssetEntry, XLinkConditionEntry, XLinkTriggerActionEntry,
    XLinkTriggerEntry, XLinkUserEntry,
)


class XLinkViewer(QWidget):
    modified_changed = Signal(bool)

    def __init__(self, handler):
        super().__init__()
        self.handler = handler
        self._modified = False
        self._setup_ui()
        self._populate()

    @property
    def modified(self):
        return self._modified

    @modified.setter
    def modified(self, value: bool):
        if self._modified != value:
            self._modified = value
            self.modified_changed.emit(value)

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)

        row = QHBoxLayout()
        self.info_label = QLabel("")
        row.addWidget(self.info_label)
        row.addStretch()
        self.export_btn = QPushButton("Export JSON...")
        self.export_btn.clicked.connect(self._on_export)
        row.addWidget(self.export_btn)
        layout.addLayout(row)

        self.tree = QTreeWidget()
        self.tree.setColumnCount(2)
        self.tree.setHeaderLabels(["Name", "Value"])
        self.tree.header().setSectionResizeMode(0, QHeaderView.Interactive)
        self.tree.header().resizeSection(0, 320)
        self.tree.header().setSectionResizeMode(1, QHeaderView.Stretch)
        layout.addWidget(self.tree)

    def _populate(self):
        self.tree.clear()
        xlink = self.handler.xlink
        if not xlink:
            self.info_label.setText("No XLink data")
            return
        header = xlink.header
        self.info_label.setText(
            f"Version {header.version} | {len(xlink.entries)} user entries | "
            f"{xlink.header_variant.name} | {'big' if xlink.byte_order == '>' else 'little'} endian"
        )
        for entry in xlink.entries:
            self.tree.addTopLevelItem(self._user_entry_item(entry))

    def _user_entry_item(self, entry: XLinkUserEntry) -> QTreeWidgetItem:
        root = QTreeWidgetItem([entry.name, ""])

        assets = QTreeWidgetItem(root, ["Assets", str(len(entry.assets))])
        for asset in entry.assets:
            assets.addChild(self._asset_item(asset))

        slots = QTreeWidgetItem(root, ["Action Slots", str(len(entry.action_slots))])
        for slot_name, slot in entry.action_slots.items():
            slot_item = QTreeWidgetItem(slots, [slot_name, str(len(slot.actions))])
            for action_name, action in slot.actions.items():
                action_item = QTreeWidgetItem(slot_item, [action_name, str(len(action.triggers))])
                self._add_triggers(action_item, action.triggers)

        props = QTreeWidgetItem(root, ["Properties", str(len(entry.properties))])
        for prop_name, prop in entry.properties.items():
            prop_item = QTreeWidgetItem(props, [prop_name, str(len(prop.triggers))])
            self._add_triggers(prop_item, prop.triggers)

        always = QTreeWidgetItem(root, ["Always Triggers", str(len(entry.always_triggers))])
        self._add_triggers(always, entry.always_triggers)
        return root

    def _asset_item(self, asset: XLinkAssetEntry) -> QTreeWidgetItem:
        item = QTreeWidgetItem([asset.name, f"parent {asset.parent_index}"])
        params = QTreeWidgetItem(item, ["Parameters", ""])
        self._add_params(params, asset.parameters)
        if asset.condition is not None:
            item.addChild(self._condition_item(asset.condition))
        for child in asset.children:
            item.addChild(self._asset_item(child))
        return item

    def _condition_item(self, cond: XLinkConditionEntry) -> QTreeWidgetItem:
        item = QTreeWidgetItem(["Condition", f"type {cond.type}"])
        if cond.name is None:
            QTreeWidgetItem(item, ["Weight", f"{cond.weight:g}"])
            return item
        QTreeWidgetItem(item, ["Watch Property", cond.name])
        QTreeWidgetItem(item, ["Value", "" if cond.value is None else str(cond.value)])
        QTreeWidgetItem(item, ["Compare Type", str(cond.compare_type)])
        QTreeWidgetItem(item, ["ID", str(cond.id)])
        QTreeWidgetItem(item, ["Solved", str(cond.is_solved)])
        QTreeWidgetItem(item, ["Global", str(cond.is_global)])
        return item

    def _add_triggers(self, parent: QTreeWidgetItem, triggers: Iterable[XLinkTriggerEntry]):
        for trigger in triggers:
            value = ""
            if isinstance(trigger, XLinkTriggerActionEntry):
                value = f"frames {trigger.start_frame:g} - {trigger.end_frame:g}"
            item = QTreeWidgetItem(parent, [trigger.name, value])
            self._add_params(item, trigger.parameters)

    @staticmethod
    def _add_params(parent: QTreeWidgetItem, params: Dict[str, ParamValue]):
        for name, value in params.items():
            QTreeWidgetItem(parent, [name, str(value)])

    def _on_export(self):
        folder = QFileDialog.getExistingDirectory(self, "Export XLink entries")
        if not folder:
            return
        try:
            written = self.handler.export_entries(folder)
        except OSError as e:
            QMessageBox.critical(self, "Export failed", str(e))
            return
        QMessageBox.information(self, "Export", f"Exported {len(written)} entries to {folder}")
